from dataclasses import dataclass

import numpy as np
import scipy.sparse

from .docstrings import add_dataclass_docstring


@dataclass
class DataStandardizer(object):
    """
    Centers and scales a design matrix and response, and maps
    coefficients fitted on the standardized data back to the
    original scale.

    If `intercept` is True, y and the columns of X are centered by their
    means. If `standardize` is True, each (centered) column of X is
    divided by its root mean square, i.e. its standard deviation with
    the `1/nobs` convention when it was centered. Columns with zero
    scale are left unscaled. The response is never scaled.
    """
    standardize: bool = True
    intercept: bool = True

    def standardize_data(self, X, y):
        """
        Compute standardization statistics and return standardized copies.

        Parameters
        ----------
        X: np.ndarray
            Design matrix of shape `(nobs, nvars)`.
        y: np.ndarray
            Response of shape `(nobs,)`.

        Returns
        -------
        (X_s, y_s): (np.ndarray, np.ndarray)
            Standardized copies; the inputs are not modified.
        """
        X = np.array(X, dtype=float, order='F') # copy
        y = np.array(y, dtype=float).reshape(-1)

        if X.ndim != 2:
            raise ValueError('X should be a 2-dimensional array, got shape {0}'.format(X.shape))
        nobs, nvars = X.shape
        if y.shape[0] != nobs:
            raise ValueError('X has {0} rows but y has length {1}'.format(nobs, y.shape[0]))
        if not (np.all(np.isfinite(X)) and np.all(np.isfinite(y))):
            raise ValueError('X and y should contain only finite values')

        self.nobs_, self.nvars_ = nobs, nvars

        if self.intercept:
            self.centers_ = X.mean(0)
            self.y_mean_ = y.mean()
            X -= self.centers_[None,:]
            if nobs > 0 and np.all(y == y[0]):
                # constant response centers to exact zeros
                self.y_mean_ = y[0]
                y[:] = 0
            else:
                y -= self.y_mean_
        else:
            self.centers_ = np.zeros(nvars)
            self.y_mean_ = 0.

        if self.standardize:
            scaling = np.sqrt((X**2).mean(0))
            # constant columns are left unscaled
            scaling[scaling <= 0] = 1.
            self.scaling_ = scaling
            X /= self.scaling_[None,:]
        else:
            self.scaling_ = np.ones(nvars)

        self.y_scale_ = 1.

        return X, y

    def recover(self, beta0, coef):
        """
        Take `(beta0, coef)` fitted on standardized data and return
        `(intercept, coef)` on the scale of the original data.

        Parameters
        ----------
        beta0: float
            Intercept on the standardized scale.
        coef: Union[np.ndarray, scipy.sparse.csc_array]
            Coefficients on the standardized scale. A sparse column of
            shape `(nvars, 1)` stays sparse.

        Returns
        -------
        (intercept, coef)
        """
        if scipy.sparse.issparse(coef):
            coef = scipy.sparse.csc_array(coef, copy=True)
            coef.data = coef.data * self.y_scale_ / self.scaling_[coef.indices]
            offset = (coef.data * self.centers_[coef.indices]).sum()
        else:
            coef = np.asarray(coef, float) * self.y_scale_ / self.scaling_
            offset = (coef * self.centers_).sum()

        if self.intercept:
            intercept = self.y_mean_ + beta0 * self.y_scale_ - offset
        else:
            intercept = 0.
        return intercept, coef

    def raw_to_scaled(self, intercept, coef):
        """
        Inverse of `recover`: take `(intercept, coef)` on the original
        scale and return them on the standardized scale.
        """
        coef = np.asarray(coef, float)
        scaled = coef * self.scaling_ / self.y_scale_
        if self.intercept:
            beta0 = (intercept + (coef * self.centers_).sum() - self.y_mean_) / self.y_scale_
        else:
            beta0 = 0.
        return beta0, scaled

add_dataclass_docstring(DataStandardizer)


@dataclass
class ElasticNetPenalty(object):
    r"""
    Elastic net penalty on the scale of the loss $\frac{1}{2n}\|y-X\beta\|^2_2$.
    """
    lambda_val: float
    alpha: float = 1.0

    def penalty(self, coef):
        coef = np.asarray(coef)
        return self.lambda_val * (self.alpha * np.fabs(coef).sum() +
                                  (1 - self.alpha) / 2 * (coef**2).sum())

    def objective(self, X, y, coef, intercept=0.):
        r"""
        Value of $\frac{1}{2}\|y - X\beta - \beta_0\|^2_2 + n \cdot P(\beta)$,
        the criterion minimized along the path.
        """
        resid = y - X @ coef - intercept
        return 0.5 * (resid**2).sum() + X.shape[0] * self.penalty(coef)

add_dataclass_docstring(ElasticNetPenalty)
