from probdist.core.distributions import (
    Distribution,
    UnivariateDistribution,
    ContinuousDistribution,
    DiscreteDistribution,
    MultivariateDistribution,
    Parameter,
)
from probdist.core.continuous import *
from probdist.core.discrete import *
from probdist.core.multivariate import *
from probdist.core.empirical import Empirical
