import logging

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

from sklearn.base import (BaseEstimator,
                          RegressorMixin)
from sklearn.utils import check_X_y
from sklearn.utils.validation import (check_array,
                                      check_is_fitted)

from .solver import ADMMControl
from .path import admm_enet
from ._utils import _interpolation_weights
from .docstrings import add_dataclass_docstring


@dataclass
class ADMMNetParameters(object):

    lambda_values: Optional[np.ndarray] = None
    lambda_min_ratio: Optional[float] = None
    nlambda: int = 100
    alpha: float = 1.0
    fit_intercept: bool = True
    standardize: bool = True
    warm_start: bool = True
    n_jobs: Optional[int] = None
    control: ADMMControl = field(default_factory=ADMMControl)

add_dataclass_docstring(ADMMNetParameters, subs={'control':'control_admm'})


@dataclass
class ADMMNet(BaseEstimator,
              RegressorMixin,
              ADMMNetParameters):
    """
    Elastic net path for least squares regression, fitted by ADMM
    with warm starts along a decreasing sequence of `lambda` values.
    """

    def fit(self,
            X,
            y,
            interpolation_grid=None):
        """
        Fit the path.

        Parameters
        ----------
        X: Union[np.ndarray, pd.DataFrame]
            Input matrix, of shape `(nobs, nvars)`.
        y: np.ndarray
            Response variable.
        interpolation_grid: np.ndarray, optional
            If given, `coefs_` and `intercepts_` are interpolated to this
            grid of `lambda` values.

        Returns
        -------
        self: object
            ADMMNet class instance.
        """

        if isinstance(X, pd.DataFrame):
            self.feature_names_in_ = list(X.columns)
        else:
            self.feature_names_in_ = ['X{}'.format(i) for i in range(X.shape[1])]

        X, y = check_X_y(X, y,
                         multi_output=False,
                         y_numeric=True,
                         estimator=self)

        control = ADMMControl.from_options(self.control)

        if control.logging: logging.info(f'Fitting ADMM path, X of shape {X.shape}')

        path_ = admm_enet(X,
                          y,
                          lambda_values=self.lambda_values,
                          nlambda=self.nlambda,
                          lambda_min_ratio=self.lambda_min_ratio,
                          alpha=self.alpha,
                          standardize=self.standardize,
                          fit_intercept=self.fit_intercept,
                          control=control,
                          warm_start=self.warm_start,
                          n_jobs=self.n_jobs)

        self.path_ = path_
        self.lambda_values_ = path_.lambda_values
        self.lambda_max_ = path_.lambda_max
        self.beta_ = path_.beta
        self.niter_ = path_.niter
        self.coefs_ = path_.coefs
        self.intercepts_ = path_.intercepts

        # fraction of the (centered) sum of squares explained

        fits = X @ self.coefs_.T + self.intercepts_[None,:]
        rss = ((y[:,None] - fits)**2).sum(0)
        if self.fit_intercept:
            null_rss = ((y - y.mean())**2).sum()
        else:
            null_rss = (y**2).sum()
        if null_rss > 0:
            dev_ratios_ = 1 - rss / null_rss
        else:
            dev_ratios_ = np.zeros_like(rss)
        self.null_deviance_ = null_rss

        self.summary_ = pd.DataFrame({'Fraction Deviance Explained':dev_ratios_},
                                     index=pd.Series(self.lambda_values_,
                                                     name='lambda'))
        df = (self.coefs_ != 0).sum(1)
        self.summary_.insert(0, 'Degrees of Freedom', df)
        self.summary_['Iterations'] = self.niter_

        self.coef_path_ = CoefPath(coefs=self.coefs_,
                                   intercepts=self.intercepts_,
                                   lambda_values=self.lambda_values_,
                                   feature_names=self.feature_names_in_,
                                   fracdev=dev_ratios_)

        if interpolation_grid is not None:
            self.coefs_, self.intercepts_ = self.interpolate_coefs(interpolation_grid)

        return self

    def predict(self,
                X,
                interpolation_grid=None):
        """
        Predictions along the path.

        Parameters
        ----------
        X: Union[np.ndarray, pd.DataFrame]
            Input matrix, of shape `(nobs, nvars)`.
        interpolation_grid: np.ndarray, optional
            Values of `lambda` at which to predict. Defaults to the
            fitted values. A scalar gives a 1-dimensional result.

        Returns
        -------
        np.ndarray
            Predictions of shape `(nobs, nlambda)`.
        """
        check_is_fitted(self, ["coefs_", "intercepts_"])
        X = check_array(X)

        if interpolation_grid is not None:
            coefs_, intercepts_ = self.interpolate_coefs(interpolation_grid)
        else:
            coefs_, intercepts_ = self.coefs_, self.intercepts_

        intercepts_ = np.atleast_1d(intercepts_)
        coefs_ = np.atleast_2d(coefs_)
        value = (coefs_ @ X.T + intercepts_[:, None]).T

        if interpolation_grid is not None and np.asarray(interpolation_grid).shape == ():
            value = value[:,0]
        return value

    def interpolate_coefs(self,
                          interpolation_grid):
        """
        Interpolate coefficients to a new lambda grid, linearly in
        `log(lambda)` between neighbouring fitted values.

        Parameters
        ----------
        interpolation_grid: np.ndarray
            New lambda values for interpolation.

        Returns
        -------
        tuple
            (coefs_, intercepts_) interpolated to the new grid.
        """
        check_is_fitted(self, ["lambda_values_"])
        path_ = self.path_
        coefs, intercepts = path_.coefs, path_.intercepts

        lo, hi, w = _interpolation_weights(self.lambda_values_, interpolation_grid)
        coefs_ = coefs[lo] * (1 - w[:,None]) + coefs[hi] * w[:,None]
        intercepts_ = intercepts[lo] * (1 - w) + intercepts[hi] * w

        if np.asarray(interpolation_grid).shape == ():
            return coefs_[0], intercepts_[0]
        return coefs_, intercepts_

add_dataclass_docstring(ADMMNet, subs={'control':'control_admm'})


@dataclass
class CoefPath(object):
    """
    Container for coefficient paths along the regularization path.

    Attributes
    ----------
    coefs : np.ndarray
        Array of coefficients for each lambda value (n_lambdas, n_features).
    intercepts : np.ndarray
        Array of intercepts for each lambda value (n_lambdas,).
    lambda_values : np.ndarray
        Array of lambda values along the path.
    feature_names : list
        Names of the features (columns).
    fracdev : np.ndarray, optional
        Fraction of deviance explained at each lambda value.
    """
    coefs: np.ndarray
    intercepts: np.ndarray
    lambda_values: np.ndarray
    feature_names: list
    fracdev: Optional[np.ndarray] = None

    @property
    def active_sets(self):
        """
        Number of non-zero coefficients at each `lambda`.
        """
        return (self.coefs != 0).sum(1)

    def xvalues(self, xvar='-lambda'):
        """
        Horizontal coordinate of each path point, with its axis label.
        """
        if xvar == '-lambda':
            return -np.log(self.lambda_values), r'$-\log(\lambda)$'
        if xvar == 'lambda':
            return np.log(self.lambda_values), r'$\log(\lambda)$'
        if xvar == 'norm':
            return np.fabs(self.coefs).sum(1), r'$\|\beta(\lambda)\|_1$'
        if xvar == 'dev':
            if self.fracdev is None:
                raise ValueError("fracdev must be set to use xvar='dev'")
            return np.asarray(self.fracdev), 'Fraction Deviance Explained'
        raise ValueError("xvar should be one of 'lambda', '-lambda', 'norm', 'dev'")

    def plot(self,
             xvar='-lambda',
             ax=None,
             legend=False,
             drop=None,
             keep=None,
             mark_entry=True):
        """
        Plot coefficient paths.

        Parameters
        ----------
        xvar: str
            Variable to plot on x-axis. One of 'lambda', '-lambda', 'norm', 'dev'.
        ax: matplotlib.axes.Axes, optional
            Axes to plot on.
        legend: bool
            Whether to show legend.
        drop: list, optional
            Features to drop from the plot.
        keep: list, optional
            Features to keep in the plot.
        mark_entry: bool
            Draw a dotted vertical line at the last null-model point,
            i.e. where the first variable enters the path.

        Returns
        -------
        matplotlib.axes.Axes
            The axes object.
        """
        xval, xlabel = self.xvalues(xvar)

        soln_path = pd.DataFrame(self.coefs,
                                 columns=self.feature_names,
                                 index=pd.Index(xval, name=xlabel))
        if drop is not None:
            soln_path = soln_path.drop(columns=drop)
        if keep is not None:
            soln_path = soln_path.loc[:, keep]
        ax = soln_path.plot(ax=ax, legend=False)
        ax.set_xlabel(xlabel)
        ax.set_ylabel(r'Coefficients ($\beta$)')
        ax.axhline(0, c='k', ls='--')

        null_idx = np.nonzero(self.active_sets == 0)[0]
        if mark_entry and null_idx.shape[0] > 0 and null_idx.shape[0] < xval.shape[0]:
            ax.axvline(xval[null_idx.max()], c='gray', ls=':')

        if legend:
            fig = ax.figure
            fig.set_layout_engine('constrained')
            fig.legend(loc='outside right upper')
        return ax
