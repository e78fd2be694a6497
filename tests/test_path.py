import pytest
import numpy as np
import scipy.sparse

from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import ElasticNet

from admmnet import admm_enet, ADMMControl
rng = np.random.default_rng(0)

tight = {'eps_abs':1e-10, 'eps_rel':1e-10, 'max_iter':50000}

def _data(n=100, p=10, seed=0):
    rng_ = np.random.default_rng(seed)
    X = rng_.standard_normal((n, p)) * rng_.uniform(0.5, 3, size=p)[None,:] + 1
    beta = np.zeros(p)
    beta[:3] = [2., -1.5, 1.]
    y = X @ beta + rng_.standard_normal(n) + 0.5
    return X, y


def test_orthonormal_lasso():
    """
    orthonormal columns, n=4, p=2: closed form soft-thresholding
    """
    X = np.array([[0.5, 0.5],
                  [0.5, -0.5],
                  [0.5, 0.5],
                  [0.5, -0.5]])
    y = np.array([4., 0., 2., -1.])
    n = X.shape[0]
    score = X.T @ y

    path = admm_enet(X, y,
                     nlambda=5,
                     lambda_min_ratio=0.1,
                     alpha=1.,
                     standardize=False,
                     fit_intercept=False,
                     control=tight)
    lmax = np.fabs(score).max() / n
    assert np.allclose(path.lambda_max, lmax)
    assert np.allclose(path.lambda_values[0], lmax)

    # at lambda_max everything is exactly zero
    assert np.diff(path.beta.indptr)[0] == 1 # intercept only
    assert np.all(path.coefs[0] == 0)
    assert np.all(path.intercepts == 0)

    path = admm_enet(X, y,
                     lambda_values=[lmax, lmax / 2],
                     alpha=1.,
                     standardize=False,
                     fit_intercept=False,
                     control=tight)
    expected = np.sign(score) * np.maximum(np.fabs(score) - n * lmax / 2, 0)
    assert np.all(path.coefs[0] == 0)
    assert np.allclose(path.coefs[1], expected, atol=1e-7)


@pytest.mark.parametrize('alpha', [1., 0.5, 0.1])
@pytest.mark.parametrize('fit_intercept', [True, False])
@pytest.mark.parametrize('standardize', [True, False])
def test_sklearn(alpha, fit_intercept, standardize):
    """
    compare to coordinate descent from sklearn
    """
    X, y = _data()
    path = admm_enet(X, y,
                     nlambda=8,
                     lambda_min_ratio=0.01,
                     alpha=alpha,
                     standardize=standardize,
                     fit_intercept=fit_intercept,
                     control=tight)

    if standardize:
        if fit_intercept:
            xm = X.mean(0)
        else:
            xm = np.zeros(X.shape[1])
        xs = np.sqrt(((X - xm[None,:])**2).mean(0))
    else:
        xs = np.ones(X.shape[1])
    X_sk = X / xs[None,:]

    for lam, coef, intercept in zip(path.lambda_values,
                                    path.coefs,
                                    path.intercepts):
        en = ElasticNet(alpha=lam,
                        l1_ratio=alpha,
                        fit_intercept=fit_intercept,
                        tol=1e-12,
                        max_iter=100000)
        en.fit(X_sk, y)
        assert np.allclose(coef, en.coef_ / xs, atol=1e-5)
        assert np.allclose(intercept, en.intercept_, atol=1e-5)


def test_wide():

    X, y = _data(n=20, p=50)
    path = admm_enet(X, y,
                     nlambda=5,
                     lambda_min_ratio=0.2,
                     alpha=0.5,
                     standardize=False,
                     control=tight)
    assert path.beta.shape == (51, 5)

    for lam, coef, intercept in zip(path.lambda_values,
                                    path.coefs,
                                    path.intercepts):
        en = ElasticNet(alpha=lam, l1_ratio=0.5, tol=1e-12, max_iter=100000)
        en.fit(X, y)
        assert np.allclose(coef, en.coef_, atol=1e-4)
        assert np.allclose(intercept, en.intercept_, atol=1e-4)


def test_path_output():

    X, y = _data()
    n, p = X.shape
    path = admm_enet(X, y, nlambda=20)

    assert path.lambda_values.shape == (20,)
    assert np.all(path.lambda_values > 0)
    assert np.all(np.diff(path.lambda_values) < 0)
    assert np.allclose(path.lambda_values[-1], 1e-4 * path.lambda_values[0])

    assert isinstance(path.beta, scipy.sparse.csc_array)
    assert path.beta.shape == (p + 1, 20)
    assert path.niter.shape == (20,)
    assert np.all(path.niter >= 0)

    # sparse columns get denser as lambda decreases
    df = np.diff(path.beta.indptr)
    assert df[0] == 1
    assert df[-1] == p + 1

    # null model at lambda_max has intercept mean(y)
    assert np.allclose(path.intercepts[0], y.mean())


def test_user_lambda_order():

    X, y = _data()
    lambda_values = np.array([0.05, 0.5, 0.01, 0.2])
    path = admm_enet(X, y, lambda_values=lambda_values)
    assert np.all(path.lambda_values == lambda_values)
    assert path.beta.shape[1] == 4

    decreasing = admm_enet(X, y, lambda_values=np.sort(lambda_values)[::-1],
                           control=tight)
    ascending = admm_enet(X, y, lambda_values=np.sort(lambda_values),
                          control=tight)
    assert np.allclose(decreasing.coefs[::-1], ascending.coefs, atol=1e-6)


def test_ridge():
    """
    alpha=0: shrinkage, but no exact zeros
    """
    X, y = _data(n=60, p=5)
    n = X.shape[0]
    lambda_values = np.array([10., 1., 0.1, 0.01])
    path = admm_enet(X, y,
                     lambda_values=lambda_values,
                     alpha=0.,
                     standardize=False,
                     control=tight)

    assert np.all(path.coefs != 0)
    norms = np.linalg.norm(path.coefs, axis=1)
    assert np.all(np.diff(norms) > 0)

    Xc = X - X.mean(0)[None,:]
    yc = y - y.mean()
    for lam, coef in zip(lambda_values, path.coefs):
        ridge = np.linalg.solve(Xc.T @ Xc + n * lam * np.identity(X.shape[1]), Xc.T @ yc)
        assert np.allclose(coef, ridge, atol=1e-6)

    # generated grid starts at a finite value
    path = admm_enet(X, y, nlambda=10, alpha=0.)
    assert np.isfinite(path.lambda_max)
    assert np.all(path.coefs != 0)


@pytest.mark.parametrize('standardize', [True, False])
def test_least_squares_limit(standardize):

    X, y = _data(n=80, p=6)
    path = admm_enet(X, y,
                     nlambda=30,
                     lambda_min_ratio=1e-6,
                     standardize=standardize,
                     control=tight)

    X1 = np.concatenate([np.ones((X.shape[0], 1)), X], axis=1)
    ols = np.linalg.lstsq(X1, y, rcond=None)[0]

    assert np.allclose(path.coefs[-1], ols[1:], atol=1e-3)
    assert np.allclose(path.intercepts[-1], ols[0], atol=1e-3)


def test_standardization_predictions():
    """
    fitting with standardize=True matches fitting on pre-standardized
    data, in terms of predictions on the original scale
    """
    X, y = _data()
    xm = X.mean(0)
    xs = np.sqrt(((X - xm[None,:])**2).mean(0))
    X_std = (X - xm[None,:]) / xs[None,:]

    lambda_values = np.array([0.5, 0.1, 0.02])
    path = admm_enet(X, y, lambda_values=lambda_values, alpha=0.7,
                     standardize=True, control=tight)
    path_std = admm_enet(X_std, y, lambda_values=lambda_values, alpha=0.7,
                         standardize=False, control=tight)

    pred = X @ path.coefs.T + path.intercepts[None,:]
    pred_std = X_std @ path_std.coefs.T + path_std.intercepts[None,:]
    assert np.allclose(pred, pred_std, atol=1e-6)


def test_zero_variance_column():

    X, y = _data(n=50, p=5)
    X[:,3] = 2.
    path = admm_enet(X, y, nlambda=10, standardize=True)
    assert np.all(np.isfinite(path.beta.data))
    assert np.all(path.coefs[:,3] == 0)


def test_warm_fewer_iterations():

    X, y = _data(n=100, p=20, seed=1)
    control = {'eps_abs':1e-8, 'eps_rel':1e-8}
    warm = admm_enet(X, y, nlambda=30, lambda_min_ratio=1e-3, control=control)
    cold = admm_enet(X, y, nlambda=30, lambda_min_ratio=1e-3, control=control,
                     warm_start=False)

    assert np.allclose(warm.lambda_values, cold.lambda_values)
    assert warm.niter.sum() < cold.niter.sum()
    assert np.allclose(warm.coefs, cold.coefs, atol=1e-3)


def test_cold_parallel():

    X, y = _data()
    serial = admm_enet(X, y, nlambda=10, warm_start=False)
    parallel = admm_enet(X, y, nlambda=10, warm_start=False, n_jobs=2)

    assert np.all(serial.niter == parallel.niter)
    assert np.allclose(serial.beta.toarray(), parallel.beta.toarray())


def test_deterministic():

    X, y = _data()
    path1 = admm_enet(X, y, nlambda=15, alpha=0.6)
    path2 = admm_enet(X, y, nlambda=15, alpha=0.6)

    assert np.all(path1.lambda_values == path2.lambda_values)
    assert np.all(path1.niter == path2.niter)
    assert np.all(path1.beta.toarray() == path2.beta.toarray())


def test_null_idempotent():

    X, y = _data()
    path = admm_enet(X, y, nlambda=3)
    lmax = path.lambda_max
    for _ in range(2):
        null = admm_enet(X, y, lambda_values=[2 * lmax, lmax])
        assert np.all(null.coefs == 0)
        assert np.all(null.niter == 0)


def test_inputs_not_modified():

    X, y = _data()
    X_copy, y_copy = X.copy(), y.copy()
    admm_enet(X, y, nlambda=5)
    assert np.all(X == X_copy)
    assert np.all(y == y_copy)


def test_non_convergence():

    X, y = _data()
    with pytest.warns(ConvergenceWarning):
        path = admm_enet(X, y, nlambda=10, control={'max_iter':1})
    assert np.all(path.niter <= 1)
    assert path.beta.shape[1] == 10


@pytest.mark.parametrize('kwargs', [{'alpha':1.5},
                                    {'alpha':-0.1},
                                    {'nlambda':0},
                                    {'lambda_min_ratio':1.},
                                    {'lambda_min_ratio':0.},
                                    {'lambda_values':[1., -1.]},
                                    {'control':{'max_iter':0}},
                                    {'control':{'eps_abs':-1.}},
                                    {'control':ADMMControl(rho_ratio=0.)}])
def test_invalid_arguments(kwargs):

    X, y = _data()
    with pytest.raises(ValueError):
        admm_enet(X, y, **kwargs)


def test_dimension_mismatch():

    X, y = _data()
    with pytest.raises(ValueError):
        admm_enet(X, y[:-1])


@pytest.mark.parametrize('alpha', [1e-4, 5e-4])
def test_small_alpha_starts_null(alpha):

    X, y = _data()
    path = admm_enet(X, y, nlambda=3, alpha=alpha)
    assert np.all(path.coefs[0] == 0)
    assert path.niter[0] == 0
    assert np.any(path.coefs[-1] != 0)


@pytest.mark.parametrize('alpha', [1., 0.5, 0.])
def test_constant_response(alpha):

    X, _ = _data(n=50, p=5)
    y = np.full(50, 3.)
    path = admm_enet(X, y, nlambda=4, alpha=alpha)

    assert path.beta.shape == (6, 4)
    assert path.lambda_max == 0
    assert np.all(path.lambda_values > 0)
    assert np.all(path.coefs == 0)
    assert np.allclose(path.intercepts, 3.)
    assert np.all(path.niter == 0)
