#  ___________________________________________________________________________
#
#  pyrobust: Python Robust Optimization
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________

from pyrobust.common.enums import ObjectiveSense, minimize, maximize
from pyrobust.core.expr import (
    LinearExpr,
    UncAffExpr,
    FullAffExpr,
    LinearConstraint,
    UncConstraint,
    UncSetConstraint,
    expressions_equal,
    inequality,
)
from pyrobust.core.base import (
    Model,
    Variable,
    Reals,
    NonNegativeReals,
    Integers,
    NonNegativeIntegers,
    Binary,
)
