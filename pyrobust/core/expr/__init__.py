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

from pyrobust.core.expr.numeric_expr import (
    NumericOperatorMixin,
    ExpressionBase,
    LinearExpr,
    UncAffExpr,
    FullAffExpr,
    as_expression,
    expressions_equal,
)
from pyrobust.core.expr.relational_expr import (
    ConstraintBase,
    LinearConstraint,
    UncConstraint,
    UncSetConstraint,
    inequality,
)
