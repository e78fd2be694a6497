from .base import (DataStandardizer,
                   ElasticNetPenalty)
from .lambda_grid import (LambdaGrid,
                          lambda_max)
from .solver import (ADMMControl,
                     ADMMState,
                     ADMMSolver,
                     GramFactor)
from .sparse_path import PathMatrixBuilder
from .path import (admm_enet,
                   ADMMPath)
from .admmnet import (ADMMNet,
                      CoefPath)

from .info import VERSION as __version__
