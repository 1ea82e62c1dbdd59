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

from pyrobust.robust.param import UncertainParam
from pyrobust.robust.adaptive import AdaptivePolicy, AdaptivePolicyValue
from pyrobust.robust.oracles import (
    AuxRow,
    AuxVar,
    CuttingPlaneOracle,
    Oracle,
    PolyhedralOracle,
    Realization,
    Reformulation,
)
from pyrobust.robust.model import RobustData, RobustModel, get_robust_data
from pyrobust.robust.uncertainty_set import UncertaintySet
from pyrobust.robust.results import (
    ReformulationPath,
    RobustSolveResults,
    robustTerminationCondition,
)
from pyrobust.robust.solve import RobustSolver, solve_robust
