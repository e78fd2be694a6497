import numpy as np


def _check_alpha(alpha):
    alpha = float(alpha)
    if not (0 <= alpha <= 1):
        raise ValueError('alpha should be in [0,1], got {0}'.format(alpha))
    return alpha


def _check_data(X, y):
    X = np.asarray(X, float)
    y = np.asarray(y, float)
    if X.ndim != 2:
        raise ValueError('X should be a 2-dimensional array, got shape {0}'.format(X.shape))
    if y.ndim == 2 and y.shape[1] == 1:
        y = y.reshape(-1)
    if y.ndim != 1:
        raise ValueError('y should be a 1-dimensional array, got shape {0}'.format(y.shape))
    if X.shape[0] != y.shape[0]:
        raise ValueError('X has {0} rows but y has length {1}'.format(X.shape[0], y.shape[0]))
    if X.shape[0] < 1 or X.shape[1] < 1:
        raise ValueError('X should have at least one row and one column, got shape {0}'.format(X.shape))
    return X, y


def _interpolation_weights(lambda_values, grid):
    """
    For each value of `grid`, the index of the fitted `lambda` just below it
    (in path order) and the weight on the neighbouring value. Values outside
    the fitted range are clipped to it.
    """
    L = np.asarray(lambda_values)
    grid = np.clip(np.atleast_1d(np.asarray(grid, float)), L.min(), L.max())

    # interpolate on log scale, path is stored with decreasing lambda
    order = np.argsort(L)
    logL = np.log(L[order])
    pos = np.interp(np.log(grid), logL, np.arange(L.shape[0]).astype(float))
    lo = np.floor(pos).astype(int)
    hi = np.minimum(lo + 1, L.shape[0] - 1)
    w = pos - lo
    return order[lo], order[hi], w
