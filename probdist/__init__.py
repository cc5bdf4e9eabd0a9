from probdist.config import settings, parameter_checks, set_parameter_checks
from probdist.exceptions import (
    ProbDistError,
    InvalidParameterError,
    DimensionMismatchError,
    UnsupportedMomentError,
)
from probdist.random_source import default_rng, reseed_default
from probdist.core import *

__version__ = "0.1.0"
