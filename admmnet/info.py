""" This file contains defines parameters for admmnet that we use to fill
settings in setup.py and the top-level docstring.
"""

CLASSIFIERS = ["Development Status :: 3 - Alpha",
               "Environment :: Console",
               "Intended Audience :: Science/Research",
               "License :: OSI Approved :: BSD License",
               "Operating System :: OS Independent",
               "Programming Language :: Python",
               "Topic :: Scientific/Engineering"]

description  = 'Elastic net paths by ADMM (Python)'

# versions
NUMPY_MIN_VERSION = '1.22'
SCIPY_MIN_VERSION = '1.11'
PANDAS_MIN_VERSION = '1.5'
SKLEARN_MIN_VERSION = '1.2'
MATPLOTLIB_MIN_VERSION = '3.7'

NAME                = 'admmnet'
VERSION             = '0.1.0'
MAINTAINER          = ""
MAINTAINER_EMAIL    = ""
DESCRIPTION         = description
LONG_DESCRIPTION    = description
URL                 = ""
DOWNLOAD_URL        = ""
LICENSE             = "BSD license"
AUTHOR              = ""
AUTHOR_EMAIL        = ""
PLATFORMS           = "OS Independent"
STATUS              = 'alpha'
PROVIDES            = []
REQUIRES            = ["numpy>=%s" % NUMPY_MIN_VERSION,
                       "scipy>=%s" % SCIPY_MIN_VERSION,
                       "pandas>=%s" % PANDAS_MIN_VERSION,
                       "scikit-learn>=%s" % SKLEARN_MIN_VERSION,
                       "joblib",
                       "tqdm",
                       "matplotlib>=%s" % MATPLOTLIB_MIN_VERSION,
                       ]
