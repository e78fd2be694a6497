from dataclasses import fields

_docstrings = {
    'X':'''
X: np.ndarray
    Input matrix, of shape `(nobs, nvars)`; each row is an observation
    vector. A copy is made before centering and scaling.''',

    'y':'''
y: np.ndarray
    Response variable.''',

    'logging':'''
logging: bool
    Write info and debug messages to log?''',

    'progress':'''
progress: bool
    Show a progress bar over the `lambda` values?''',

    'standardize':'''
standardize: bool
    Scale columns of X to unit variance before fitting? Coefficients
    are always returned on the original scale. Default is True.''',

    'intercept':'''
intercept: bool
    Center X and y so that an unpenalized intercept is fitted?''',

    'lambda_val':'''
lambda_val: float
    A single value for the `lambda` hyperparameter.''',

    'lambda_values':'''
lambda_values: np.ndarray
    An array of `lambda` hyperparameters. Used verbatim, in the given
    order, if supplied.''',

    'lambda_min_ratio':'''
lambda_min_ratio: float
    Ratio of lambda_max to smallest lambda.
    Used to set sequence of lamdba values. Defaults to `1e-2` if
    `nobs < nvars` else `1e-4`.''',

    'nlambda':'''
nlambda: int
    Number of values on data-dependent grid of lambda values.
    Values are equally spaced on a log-scale from lambda_max to
    lambda_max * lambda_min_ratio.''',

    'alpha':r'''
alpha: float
    The elasticnet mixing parameter in [0,1].  The penalty is
    defined as $(1-\alpha)/2||\beta||_2^2+\alpha||\beta||_1.$
    `alpha=1` is the lasso penalty, and `alpha=0` the ridge
    penalty. Defaults to 1.''',

    'fit_intercept':'''
fit_intercept: bool
    Should intercept be fitted (default=`True`) or set to zero (`False`)?''',

    'max_iter':'''
max_iter: int
    Maximum number of ADMM iterations for each value of `lambda`.
    Default is `10^4`.''',

    'eps_abs':'''
eps_abs: float
    Absolute tolerance for the primal and dual residuals, scaled by
    `sqrt(nvars)`. Default is `1e-5`.''',

    'eps_rel':'''
eps_rel: float
    Relative tolerance for the primal and dual residuals. Default is
    `1e-5`.''',

    'rho_ratio':'''
rho_ratio: float
    The augmented Lagrangian parameter `rho` is set to `rho_ratio`
    times `lambda` (on the solver's scale). Default is `0.1`.''',

    'adaptive_rho':'''
adaptive_rho: bool
    Rebalance `rho` during the iterations when primal and dual
    residuals differ by more than a factor of 10?''',

    'zero_tol':'''
zero_tol: float
    Coefficients with absolute value at most `zero_tol` are stored
    as exact zeros in the sparse path.''',

    'warm_start':'''
warm_start: bool
    Start each `lambda` from the solution at the previous one
    (default). If False every `lambda` is solved from a cold start,
    optionally in parallel.''',

    'n_jobs':'''
n_jobs: Optional[int]
    Number of threads used for cold-start paths. Ignored when
    `warm_start` is True.''',

    'control_admm': '''
control: Optional(Union[ADMMControl, dict])
    Parameters to control the solver; a dict is read by
    `ADMMControl.from_options`.''',

    'beta':'''
beta: scipy.sparse.csc_array
    Matrix of coefficients, stored in sparse matrix format. Row 0
    holds the intercepts, one column per value of `lambda`.''',

    'niter':'''
niter: np.ndarray
    Number of ADMM iterations used at each value of `lambda`.''',

    'lambda_max':'''
lambda_max: float
    Smallest `lambda` for which all coefficients are zero.''',

    'x':'''
x: np.ndarray
    Primal iterate (regression coefficients on the standardized scale).''',

    'z':'''
z: np.ndarray
    Auxiliary iterate after the elastic net proximal map.''',

    'u':'''
u: np.ndarray
    Scaled dual variable.''',

    'rho':'''
rho: float
    Current augmented Lagrangian parameter.''',
}


def make_docstring(*fieldnames):

    field_str = '\n\n'.join([_docstrings[f].strip() for f in fieldnames])
    return f'''
Parameters
----------

{field_str}
'''

def add_dataclass_docstring(kls, subs={}):
    """
    Add a docstring to a dataclass using entries in `._docstrings` based on the fields
    of the dataclass.
    """

    fieldnames = [f.name for f in fields(kls)]
    for k in subs:
        fieldnames[fieldnames.index(k)] = subs[k]

    kls.__doc__ = '\n'.join([kls.__doc__ or '', make_docstring(*fieldnames)])
    return kls
