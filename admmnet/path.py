import logging
import warnings

from dataclasses import dataclass

import numpy as np
import scipy.sparse
from joblib import Parallel, delayed
from sklearn.exceptions import ConvergenceWarning
from tqdm import tqdm

from .base import DataStandardizer
from .lambda_grid import (LambdaGrid,
                          check_lambda_values,
                          lambda_max_from_score,
                          resolve_min_ratio)
from .solver import (ADMMControl,
                     ADMMSolver)
from .sparse_path import PathMatrixBuilder
from ._utils import (_check_alpha,
                     _check_data)
from .docstrings import add_dataclass_docstring


@dataclass
class ADMMPath(object):
    """
    Result of `admm_enet`: the `lambda` values used, the sparse
    coefficient path (one column per `lambda`) and the iteration
    counts.
    """
    lambda_values: np.ndarray
    beta: scipy.sparse.csc_array
    niter: np.ndarray
    lambda_max: float

    @property
    def intercepts(self):
        return self.beta[[0],:].toarray().reshape(-1)

    @property
    def coefs(self):
        """
        Dense coefficients of shape `(nlambda, nvars)`.
        """
        return self.beta[1:,:].toarray().T

add_dataclass_docstring(ADMMPath)


def admm_enet(X,
              y,
              lambda_values=None,
              nlambda=100,
              lambda_min_ratio=None,
              alpha=1.0,
              standardize=True,
              fit_intercept=True,
              control=None,
              warm_start=True,
              n_jobs=None):
    """
    Fit an elastic net path by ADMM.

    Minimizes, for each `lambda`,

        1/2 ||y - beta_0 - X beta||^2 + lambda * n * (alpha ||beta||_1 + (1-alpha)/2 ||beta||^2)

    with `beta` on the standardized scale if `standardize` is True.

    Parameters
    ----------
    X: np.ndarray
        Input matrix, of shape `(nobs, nvars)`. Not modified.
    y: np.ndarray
        Response variable. Not modified.
    lambda_values: Optional[np.ndarray]
        Values of `lambda`, used in the order given. Decreasing order
        makes warm starts effective. If None, a grid is generated.
    nlambda: int
        Size of the generated grid.
    lambda_min_ratio: Optional[float]
        Smallest generated `lambda` as a fraction of `lambda_max`.
    alpha: float
        The elasticnet mixing parameter in [0,1].
    standardize: bool
        Scale columns of X to unit variance?
    fit_intercept: bool
        Fit an unpenalized intercept?
    control: Optional[Union[ADMMControl, dict]]
        Solver options: `max_iter`, `eps_abs`, `eps_rel`, `rho_ratio`, ...
    warm_start: bool
        Use the solution at each `lambda` as the starting point for
        the next. If False, every `lambda` is solved from a cold start.
    n_jobs: Optional[int]
        Threads for cold-start paths.

    Returns
    -------
    ADMMPath
    """

    X, y = _check_data(X, y)
    alpha = _check_alpha(alpha)
    control = ADMMControl.from_options(control)

    nobs, nvars = X.shape
    if lambda_values is not None:
        lambda_values = check_lambda_values(lambda_values)
        grid = None
    else:
        grid = LambdaGrid(nlambda=nlambda,
                          lambda_min_ratio=resolve_min_ratio(lambda_min_ratio, nobs, nvars))

    standardizer = DataStandardizer(standardize=standardize,
                                    intercept=fit_intercept)
    X_s, y_s = standardizer.standardize_data(X, y)

    solver = ADMMSolver(X_s,
                        y_s,
                        alpha=alpha,
                        control=control)

    # the solver works with 1/2 ||y - X beta||^2, i.e. lambda * n

    lmax = lambda_max_from_score(solver.get_lambda_zero(), nobs, alpha) * standardizer.y_scale_
    if grid is not None:
        # zero score: the null model is the solution for every lambda,
        # so the grid only needs a nominal starting value
        lambda_values = grid.generate(lmax if lmax > 0 else 1.)
    solver_lambdas = lambda_values * nobs / standardizer.y_scale_

    nlam = lambda_values.shape[0]
    builder = PathMatrixBuilder(nvars + 1)
    niter = np.zeros(nlam, int)
    converged = np.ones(nlam, bool)
    pb = tqdm(total=nlam, disable=not control.progress)

    if warm_start:
        for i, lam in enumerate(solver_lambdas):
            if control.logging: logging.info(f'Fitting parameter {lambda_values[i]}')
            if i == 0:
                solver.init(lam, control.rho_ratio)
            else:
                solver.init_warm(lam)
            niter[i] = solver.solve(control.max_iter)
            converged[i] = solver.status == 'converged'
            beta0, coef = standardizer.recover(0., solver.get_x())
            builder.add_column(beta0, coef)
            pb.update(1)
    else:
        factor = solver.factor

        def _cold_fit(lam):
            cold = ADMMSolver(X_s,
                              y_s,
                              alpha=alpha,
                              control=control,
                              factor=factor)
            cold.init(lam, control.rho_ratio)
            niter_ = cold.solve(control.max_iter)
            return niter_, cold.status == 'converged', cold.get_x()

        results = Parallel(n_jobs=n_jobs, prefer='threads')(
            delayed(_cold_fit)(lam) for lam in solver_lambdas)
        for i, (niter_, converged_, coef) in enumerate(results):
            niter[i], converged[i] = niter_, converged_
            beta0, coef = standardizer.recover(0., coef)
            builder.add_column(beta0, coef)
            pb.update(1)

    pb.close()
    beta = builder.compress()

    nmax = (~converged).sum()
    if nmax > 0:
        msg = (f'ADMM did not converge for {nmax} of {nlam} values of lambda; '
               f'consider increasing max_iter (currently {control.max_iter})')
        warnings.warn(msg, ConvergenceWarning)
        if control.logging: logging.warning(msg)

    return ADMMPath(lambda_values=lambda_values,
                    beta=beta,
                    niter=niter,
                    lambda_max=lmax)
