"""
ADMM for the elastic net.

Writing the problem as

    minimize 1/2 ||y - X x||^2 + lam * (alpha ||z||_1 + (1 - alpha)/2 ||z||^2)
    subject to x = z

the scaled-form ADMM iteration is

    x <- (X'X + rho I)^{-1} (X'y + rho (z - u))
    z <- S(x + u, lam * alpha / rho) / (1 + lam * (1 - alpha) / rho)
    u <- u + x - z

with `S` the soft-thresholding operator. Here `lam` is on the scale of
the loss above, i.e. `n` times the `lambda` reported to users.
"""

import logging
from dataclasses import dataclass, field, asdict

import numpy as np
import scipy.sparse

from .base import ElasticNetPenalty
from .docstrings import add_dataclass_docstring

NULL_SLACK = 1e-10


@dataclass
class ADMMControl(object):
    """Control parameters for the ADMM solver."""

    max_iter: int = 10000
    eps_abs: float = 1e-5
    eps_rel: float = 1e-5
    rho_ratio: float = 0.1
    adaptive_rho: bool = False
    zero_tol: float = 1e-12
    logging: bool = False
    progress: bool = False

    def validate(self):
        if int(self.max_iter) != self.max_iter or self.max_iter < 1:
            raise ValueError('max_iter should be a positive integer, got {0}'.format(self.max_iter))
        for name in ['eps_abs', 'eps_rel', 'rho_ratio']:
            value = getattr(self, name)
            if not (np.isfinite(value) and value > 0):
                raise ValueError('{0} should be positive, got {1}'.format(name, value))
        if self.zero_tol < 0:
            raise ValueError('zero_tol should be non-negative, got {0}'.format(self.zero_tol))
        return self

    @classmethod
    def from_options(cls, options):
        """
        Build a control from `None`, an `ADMMControl` or a dict
        with (a subset of) the field names as keys.
        """
        if options is None:
            return cls().validate()
        if isinstance(options, cls):
            return cls(**asdict(options)).validate()
        options = dict(options)
        known = set(asdict(cls()).keys())
        unknown = set(options.keys()) - known
        if unknown:
            raise ValueError('unrecognized solver options: {0}'.format(sorted(unknown)))
        return cls(**options).validate()

add_dataclass_docstring(ADMMControl)


@dataclass
class ADMMState(object):
    """
    Iterates of the ADMM solver. Passed from one `lambda` to the
    next on a warm-started path.
    """
    x: np.ndarray
    z: np.ndarray
    u: np.ndarray
    rho: float

    @classmethod
    def zeros(cls, nvars, rho):
        return cls(x=np.zeros(nvars),
                   z=np.zeros(nvars),
                   u=np.zeros(nvars),
                   rho=rho)

    def set_rho(self, rho):
        # keep the unscaled dual rho * u fixed
        self.u *= self.rho / rho
        self.rho = rho

add_dataclass_docstring(ADMMState)


class GramFactor(object):
    """
    Solves `(X'X + rho I) x = b` for any `rho > 0` from one thin SVD
    `X = U diag(s) V'`:

        x = V diag(1 / (s**2 + rho)) V'b + (b - V V'b) / rho

    The second term vanishes unless `nvars > nobs`, in which case only
    `nobs`-dimensional quantities are formed. Read-only once built, so
    one factor can be shared by solvers on the same data.
    """

    def __init__(self, X):
        nobs, nvars = X.shape
        _, s, Vt = np.linalg.svd(X, full_matrices=False)
        self.shape = (nvars, nvars)
        self.s2 = s**2
        self.Vt = Vt
        self.wide = Vt.shape[0] < nvars

    def solve(self, b, rho):
        Vtb = self.Vt @ b
        x = self.Vt.T @ (Vtb / (self.s2 + rho))
        if self.wide:
            x += (b - self.Vt.T @ Vtb) / rho
        return x

    @property
    def max_eigenvalue(self):
        return self.s2.max() if self.s2.shape[0] else 0.


def soft_threshold(v, t):
    return np.sign(v) * np.maximum(np.fabs(v) - t, 0)


class ADMMSolver(object):
    """
    ADMM solver for one elastic net problem at a time, with support
    for warm starts along a path of `lambda` values.

    Parameters
    ----------
    X: np.ndarray
        Standardized design matrix.
    y: np.ndarray
        Centered response.
    alpha: float
        Elastic net mixing parameter.
    control: ADMMControl
        Tolerances and iteration limits.
    factor: Optional[GramFactor]
        A factorization of `X` to share; computed if not given.
    """

    def __init__(self,
                 X,
                 y,
                 alpha=1.0,
                 control=None,
                 factor=None):

        self.X, self.y = X, y
        self.alpha = float(alpha)
        self.control = ADMMControl.from_options(control)
        self.nobs, self.nvars = X.shape

        if factor is None:
            factor = GramFactor(X)
        if factor.shape != (self.nvars, self.nvars):
            raise ValueError('factor does not match the design matrix')
        self.factor = factor

        self.Xty = X.T @ y
        self.lam = None
        self.state = None
        self.status = 'uninitialized'

    # convenience

    @property
    def rho(self):
        return None if self.state is None else self.state.rho

    def get_lambda_zero(self):
        """
        `max_j |X_j'y|`: on the solver's scale, the smallest value of
        `lam * alpha` at which the zero vector is optimal.
        """
        return np.fabs(self.Xty).max() if self.nvars else 0.

    # state machine

    def init(self, lam, rho_ratio=None):
        """
        Cold start at `lam`: zero iterates, `rho = rho_ratio * lam`.
        """
        lam = self._check_lam(lam)
        if rho_ratio is None:
            rho_ratio = self.control.rho_ratio
        if not rho_ratio > 0:
            raise ValueError('rho_ratio should be positive')
        self.rho_ratio = rho_ratio
        self.lam = lam
        self.state = ADMMState.zeros(self.nvars, rho_ratio * lam)
        self.status = 'initialized'
        return self

    def init_warm(self, lam):
        """
        Warm start at `lam` from the current iterates. `rho` is rescaled
        in proportion to `lam` so that the ratio set by `init` (or reached
        by adaptation) is kept.
        """
        if self.state is None:
            raise RuntimeError('init must be called before init_warm')
        lam = self._check_lam(lam)
        self.state.set_rho(self.state.rho * lam / self.lam)
        self.lam = lam
        self.status = 'initialized'
        return self

    def solve(self, max_iter=None):
        """
        Run ADMM iterations until the primal and dual residuals meet
        their tolerances or `max_iter` iterations have been taken.

        Returns
        -------
        niter: int
            Number of iterations taken.
        """
        if self.state is None:
            raise RuntimeError('init must be called before solve')
        control = self.control
        if max_iter is None:
            max_iter = control.max_iter
        if max_iter < 1:
            raise ValueError('max_iter should be a positive integer, got {0}'.format(max_iter))

        state = self.state
        lam, alpha = self.lam, self.alpha
        l1, l2 = lam * alpha, lam * (1 - alpha)

        if self.get_lambda_zero() <= l1 * (1 + NULL_SLACK):
            # zero satisfies the KKT conditions: set the fixed point exactly
            state.x[:] = 0
            state.z[:] = 0
            state.u[:] = self.Xty / state.rho
            self.status = 'converged'
            self.residuals_ = (0., 0.)
            if control.logging: logging.debug(f'lambda {lam}: null solution, no iterations')
            return 0

        sqrt_p = np.sqrt(self.nvars)
        x, z, u, rho = state.x, state.z, state.u, state.rho
        self.status = 'maxiter'

        for i in range(max_iter):

            x = self.factor.solve(self.Xty + rho * (z - u), rho)
            z_old = z
            z = soft_threshold(x + u, l1 / rho) / (1 + l2 / rho)
            u = u + x - z

            if not (np.all(np.isfinite(x)) and np.all(np.isfinite(z)) and np.all(np.isfinite(u))):
                raise FloatingPointError(f'non-finite ADMM iterate at lambda {lam}, iteration {i+1}')

            r_norm = np.linalg.norm(x - z)
            s_norm = rho * np.linalg.norm(z - z_old)
            eps_pri = sqrt_p * control.eps_abs + control.eps_rel * max(np.linalg.norm(x),
                                                                        np.linalg.norm(z))
            eps_dual = sqrt_p * control.eps_abs + control.eps_rel * rho * np.linalg.norm(u)

            if r_norm <= eps_pri and s_norm <= eps_dual:
                self.status = 'converged'
                break

            if control.adaptive_rho:
                if r_norm > 10 * s_norm:
                    rho *= 2
                    u = u / 2
                elif s_norm > 10 * r_norm:
                    rho /= 2
                    u = u * 2

        state.x, state.z, state.u, state.rho = x, z, u, rho
        self.residuals_ = (r_norm, s_norm)

        if control.logging:
            logging.debug(f'lambda {lam}: {self.status} after {i+1} iterations, '
                          f'primal residual {r_norm:.3e} (tol {eps_pri:.3e}), '
                          f'dual residual {s_norm:.3e} (tol {eps_dual:.3e})')
        return i + 1

    def get_x(self):
        """
        Current coefficient estimate as a sparse column of shape
        `(nvars, 1)`. The shrunken iterate `z` is used, so exact zeros
        come from thresholding; entries at most `zero_tol` in absolute
        value are dropped.
        """
        if self.state is None:
            raise RuntimeError('init must be called before get_x')
        z = self.state.z
        idx = np.nonzero(np.fabs(z) > self.control.zero_tol)[0]
        return scipy.sparse.csc_array((z[idx],
                                       idx,
                                       np.array([0, idx.shape[0]])),
                                      shape=(self.nvars, 1))

    def objective(self):
        """
        Value of the penalized loss at the current `z`.
        """
        penalty = ElasticNetPenalty(lambda_val=self.lam / self.nobs,
                                    alpha=self.alpha)
        return penalty.objective(self.X, self.y, self.state.z)

    def _check_lam(self, lam):
        lam = float(lam)
        if not (np.isfinite(lam) and lam > 0):
            raise ValueError('lambda should be positive and finite, got {0}'.format(lam))
        return lam
