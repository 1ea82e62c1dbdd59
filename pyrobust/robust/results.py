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
"""
Objects returned by the robust solver.
"""

from enum import Enum

from pyrobust.solvers.results import TerminationCondition


class robustTerminationCondition(Enum):
    """Outcome of a robust solve"""

    optimal = 0
    infeasible = 1
    unbounded = 2
    infeasible_or_unbounded = 3
    #: the cutting-plane loop ran out of iterations
    max_iter = 4
    #: the wall time limit was hit
    time_out = 5
    #: the deterministic solver failed or returned an unusable status
    error = 6

    @property
    def message(self):
        """One-line description, as logged at the end of a solve"""
        return _messages[self.name]

    @classmethod
    def from_solver_status(cls, termination_condition):
        """Map a deterministic solver :class:`TerminationCondition`"""
        return _solver_status_map.get(termination_condition, cls.error)

    def __str__(self):
        return self.name


_messages = {
    'optimal': "Robust optimal solution identified.",
    'infeasible': "Problem is robust infeasible.",
    'unbounded': "Problem is robust unbounded.",
    'infeasible_or_unbounded': "Problem is robust infeasible or unbounded.",
    'max_iter': "Cutting-plane iteration limit reached.",
    'time_out': "Time limit reached before a robust solution was confirmed.",
    'error': "The deterministic solver did not return a usable solution.",
}

_solver_status_map = {
    TerminationCondition.optimal: robustTerminationCondition.optimal,
    TerminationCondition.infeasible: robustTerminationCondition.infeasible,
    TerminationCondition.unbounded: robustTerminationCondition.unbounded,
    TerminationCondition.infeasibleOrUnbounded: (
        robustTerminationCondition.infeasible_or_unbounded
    ),
    TerminationCondition.maxTimeLimit: robustTerminationCondition.time_out,
}


class ReformulationPath(Enum):
    """How the uncertain constraints of a model were handled

    ``direct`` when every uncertain constraint was dualized,
    ``cutting_plane`` when every one was separated and ``hybrid`` when
    both happened.
    """

    direct = 0
    cutting_plane = 1
    hybrid = 2

    def __str__(self):
        return self.name


class RobustSolveResults(object):
    """
    Results of :meth:`RobustSolver.solve`.

    Attributes
    ----------
    config : ConfigDict
        The options the solve ran with.
    termination_condition : robustTerminationCondition
    reformulation_path : ReformulationPath
    iterations : int
        Number of deterministic solves (1 on the direct path).
    time : float
        Wall time of the whole solve, in seconds.
    objective_value : float or None
        Objective value of the final solution.  For models with an
        uncertain objective, this is the worst-case value.
    solution : numpy.ndarray or None
        Values of the model variables (by variable index).
    solver_results : SolverResults or None
        Results of the last deterministic solve.
    cuts : dict
        Uncertain constraint index (or expander label) -> list of
        :class:`Realization` objects added as cuts.
    adaptive_policies : dict
        Variable index -> :class:`AdaptivePolicyValue`.
    timing_data : TimingData
    """

    _summary = (
        ("iterations", "Iterations", "{}"),
        ("time", "Solve time (wall s)", "{:.3f}"),
        ("objective_value", "Final objective value", "{:.4e}"),
        ("reformulation_path", "Reformulation path", "{}"),
        ("termination_condition", "Termination condition", "{}"),
    )

    def __init__(
        self,
        config=None,
        termination_condition=None,
        reformulation_path=None,
        iterations=None,
        time=None,
        objective_value=None,
    ):
        self.config = config
        self.termination_condition = termination_condition
        self.reformulation_path = reformulation_path
        self.iterations = iterations
        self.time = time
        self.objective_value = objective_value
        self.solution = None
        self.solver_results = None
        self.cuts = {}
        self.adaptive_policies = {}
        self.timing_data = None

    @property
    def num_cuts(self):
        return sum(len(cuts) for cuts in self.cuts.values())

    def active_cuts(self, constraint_index):
        """The realizations added as cuts for an uncertain constraint"""
        return list(self.cuts.get(constraint_index, ()))

    def adaptive_policy(self, var):
        """Return the :class:`AdaptivePolicyValue` of an adaptive variable"""
        try:
            return self.adaptive_policies[var.index]
        except KeyError:
            raise ValueError(
                "Variable '%s' does not have an affine policy" % (var,)
            ) from None

    def __str__(self):
        # the options in self.config are not part of the summary
        width = max(len(label) for _, label, _ in self._summary)
        lines = ["Termination stats:"]
        for attr, label, fmt in self._summary:
            val = getattr(self, attr)
            text = str(val) if val is None else fmt.format(val)
            lines.append(f" {label:<{width}} : {text}")
        return "\n".join(lines)
