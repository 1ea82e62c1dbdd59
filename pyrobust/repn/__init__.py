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

from pyrobust.repn.linear_program import LinearProgram
from pyrobust.repn.standard_repn import (
    LinearRepn,
    UncertainRepn,
    MixedRepn,
    generate_linear_repn,
    generate_uncertain_repn,
    generate_mixed_repn,
)
