"""
Grids of `lambda` values for elastic net paths.

For the criterion

    1/2 ||y - X beta||^2 + lambda * n * (alpha ||beta||_1 + (1 - alpha)/2 ||beta||^2)

the zero vector is optimal exactly when `max_j |X_j'y| <= lambda * n * alpha`,
which gives `lambda_max`. For `alpha=0` no finite value zeroes the
coefficients; as in glmnet, `1e-3` stands in for `alpha` so the grid
still starts at a large, finite value. Any positive `alpha` is used as is.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .docstrings import add_dataclass_docstring

ALPHA_FLOOR = 1e-3


def lambda_max(X, y, alpha=1.0):
    """
    Smallest `lambda` at which all coefficients are zero.

    Parameters
    ----------
    X: np.ndarray
        Standardized design matrix of shape `(nobs, nvars)`.
    y: np.ndarray
        Centered response.
    alpha: float
        Elastic net mixing parameter.

    Returns
    -------
    float
    """
    score = X.T @ y
    return lambda_max_from_score(score, X.shape[0], alpha)


def lambda_max_from_score(score, nobs, alpha=1.0):
    if alpha > 0:
        return np.fabs(score).max() / nobs / alpha
    return np.fabs(score).max() / nobs / ALPHA_FLOOR


def resolve_min_ratio(lambda_min_ratio, nobs, nvars):
    if lambda_min_ratio is None:
        return 1e-2 if nobs < nvars else 1e-4
    return lambda_min_ratio


@dataclass
class LambdaGrid(object):
    """
    Log-spaced, strictly decreasing grid from `lambda_max` down to
    `lambda_min_ratio * lambda_max`.
    """
    nlambda: int = 100
    lambda_min_ratio: Optional[float] = None

    def __post_init__(self):
        if int(self.nlambda) != self.nlambda or self.nlambda < 1:
            raise ValueError('nlambda should be a positive integer, got {0}'.format(self.nlambda))
        self.nlambda = int(self.nlambda)
        if self.lambda_min_ratio is not None:
            if not (0 < self.lambda_min_ratio < 1):
                raise ValueError('lambda_min_ratio should be in (0,1), got {0}'.format(self.lambda_min_ratio))

    def generate(self, lambda_max):
        """
        Parameters
        ----------
        lambda_max: float
            Largest value of the grid.

        Returns
        -------
        np.ndarray
            `nlambda` values, strictly decreasing.
        """
        if not (np.isfinite(lambda_max) and lambda_max > 0):
            raise ValueError('lambda_max should be positive and finite, got {0}'.format(lambda_max))
        if self.lambda_min_ratio is None:
            raise ValueError('lambda_min_ratio must be set before generating a grid')
        if self.nlambda == 1:
            return np.array([lambda_max], float)
        values = np.exp(np.linspace(np.log(lambda_max),
                                    np.log(self.lambda_min_ratio * lambda_max),
                                    self.nlambda))
        # exact endpoints, free of exp/log round-off
        values[0] = lambda_max
        values[-1] = self.lambda_min_ratio * lambda_max
        return values

add_dataclass_docstring(LambdaGrid)


def check_lambda_values(lambda_values):
    """
    Validate a user supplied sequence of `lambda` values. The order is
    kept as given.
    """
    values = np.asarray(lambda_values, float)
    if values.ndim == 0:
        values = values.reshape((1,))
    if values.ndim != 1 or values.shape[0] < 1:
        raise ValueError('lambda_values should be a non-empty 1-dimensional sequence')
    if not np.all(np.isfinite(values)) or np.any(values <= 0):
        raise ValueError('lambda_values should be positive and finite')
    return values.copy()
