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

from pyrobust.solvers.factory import SolverFactory
from pyrobust.solvers.results import SolutionStatus, SolverResults, TerminationCondition
from pyrobust.solvers.base import SolverBase

# register the solver plugins
from pyrobust.solvers import highs
