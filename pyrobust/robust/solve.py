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

"""The robust solve orchestrator

A solve runs through the stages

``Start -> AdaptiveExpansion -> OracleSetup -> {DirectReformulation |
IterativeRefinement} -> Solve -> Done``

and may fail in any of them:

1. the working model is built from the declarative state of the model
   and the adaptive policies are substituted,
2. every distinct oracle is set up against the uncertainty set,
3. the uncertain constraints of non-separating oracles are reformulated
   and injected into the deterministic program; separating oracles
   contribute their initial (nominal) cuts,
4. the deterministic program is solved; while separating oracles find
   violated realizations, the corresponding cuts are added and the
   program is re-solved.
"""

from concurrent.futures import ThreadPoolExecutor
import logging

import numpy as np

from pyrobust.common.errors import (
    IterationLimitError,
    SeparationTimeLimitError,
    SolverError,
)
from pyrobust.common.log import is_debug_set
from pyrobust.robust.adaptive import (
    AdaptiveExpander,
    AdaptivePolicy,
    AdaptivePolicyValue,
)
from pyrobust.robust.config import default_robust_solver_logger, robust_config
from pyrobust.robust.model import get_robust_data
from pyrobust.robust.results import (
    ReformulationPath,
    RobustSolveResults,
    robustTerminationCondition,
)
from pyrobust.robust.uncertainty_set import UncertaintySet
from pyrobust.robust.util import (
    IterationLogRecord,
    TimingData,
    get_main_elapsed_time,
    get_remaining_time,
    time_code,
)
from pyrobust.robust.working_model import WorkingModel
from pyrobust.version import version

logger = logging.getLogger(__name__)


def _separate_all(rows, candidate, config):
    """Separate every row against the (frozen) candidate; all results
    are collected before any cut is added"""
    if config.separation_workers > 1 and len(rows) > 1:
        with ThreadPoolExecutor(max_workers=config.separation_workers) as executor:
            futures = [
                executor.submit(row.oracle.separate, row, candidate) for row in rows
            ]
            return [future.result() for future in futures]
    return [row.oracle.separate(row, candidate) for row in rows]


class RobustSolver(object):
    """
    Solver for linear models with uncertain parameters.

    The uncertain constraints of the model are handled by their
    oracles: the default :class:`PolyhedralOracle` reformulates them in
    closed form by LP duality, while separating oracles
    (:class:`CuttingPlaneOracle`) drive a cutting-plane loop.
    """

    CONFIG = robust_config()
    _LOG_LINE_LENGTH = 78

    def __init__(self, **kwds):
        self.config = self.CONFIG(value=kwds)

    def version(self):
        """Return a str specifying the pyrobust version."""
        return version

    def _log_intro(self, logger, **log_kwargs):
        """
        Log introductory messages.

        Parameters
        ----------
        logger : logging.Logger
            Logger through which to emit messages.
        **log_kwargs : dict, optional
            Keyword arguments to ``logger.log()`` callable.
            Should not include `msg`.
        """
        logger.log(msg="=" * self._LOG_LINE_LENGTH, **log_kwargs)
        logger.log(
            msg=f"pyrobust: Python Robust Optimization, v{self.version()}.",
            **log_kwargs,
        )
        logger.log(msg="=" * self._LOG_LINE_LENGTH, **log_kwargs)

    def _log_config(self, logger, config, **log_kwargs):
        """Log the solver options."""
        logger.log(msg="Solver options:", **log_kwargs)
        for key, val in config.items():
            if key in ("solver", "separation_solver") and val is not None:
                val = getattr(val, "name", val)
            elif key == "progress_logger":
                val = getattr(val, "name", val)
            logger.log(msg=f" {key}={val!r}", **log_kwargs)
        logger.log(msg="-" * self._LOG_LINE_LENGTH, **log_kwargs)

    def _log_model_statistics(self, logger, model, working, **log_kwargs):
        rd = model.robust_data
        num_aux = working.lp.num_columns - working.num_user_columns
        stats = [
            ("Number of variables", model.num_variables),
            ("  Adaptive variables", len(rd.adapt)),
            ("  Policy/epigraph variables", num_aux),
            ("Number of uncertain parameters", rd.num_params),
            ("Number of deterministic constraints", working.lp.num_rows),
            ("Number of uncertain constraints", len(working.mixed_rows)),
            ("Number of uncertainty set constraints", len(rd.uncertainty_set)),
        ]
        logger.log(msg="Model statistics:", **log_kwargs)
        for desc, val in stats:
            logger.log(msg=f"  {desc} : {val}", **log_kwargs)
        logger.log(msg="-" * self._LOG_LINE_LENGTH, **log_kwargs)

    def solve(self, model, **kwds):
        """Solve the robust counterpart of a :class:`RobustModel`.

        Parameters
        ----------
        model : RobustModel
            The model to solve.  It is not modified, apart from the
            variable values when ``load_solution`` is True.
        **kwds : dict, optional
            Solver options (see :func:`robust_config`).

        Returns
        -------
        RobustSolveResults
            Summary of the solve.
        """
        rd = get_robust_data(model)
        config = self.config(value=kwds)
        if config.progress_logger is None:
            config.progress_logger = default_robust_solver_logger
        progress_logger = config.progress_logger
        timing = TimingData()
        results = RobustSolveResults(config=config)
        results.timing_data = timing

        with time_code(timing, "main", is_main_timer=True):
            self._log_intro(progress_logger, level=logging.INFO)
            self._log_config(progress_logger, config, level=logging.INFO)

            with time_code(timing, "main.expansion"):
                working = AdaptiveExpander.from_model(model).apply(
                    WorkingModel.build(model)
                )
            self._log_model_statistics(
                progress_logger, model, working, level=logging.INFO
            )

            with time_code(timing, "main.setup"):
                uncertainty_set = UncertaintySet.from_model(model)
                uncertain_rows = []
                for row in working.mixed_rows:
                    if row.is_deterministic():
                        linear, lower, upper = row.specialize(())
                        working.lp.add_row(linear.items(), lower, upper, row.name)
                    else:
                        uncertain_rows.append(row)
                oracles = {}
                for row in uncertain_rows:
                    oracles.setdefault(id(row.oracle), row.oracle)
                for oracle in oracles.values():
                    oracle.setup(uncertainty_set, config)

            with time_code(timing, "main.reformulation"):
                direct = [r for r in uncertain_rows if not r.oracle.uses_separation]
                separating = [r for r in uncertain_rows if r.oracle.uses_separation]
                for row in direct:
                    working.inject(row.oracle.reformulate(row))
                if config.nominal_cuts:
                    for row in separating:
                        working.inject(row.oracle.reformulate(row))

            if separating and direct:
                results.reformulation_path = ReformulationPath.hybrid
            elif separating:
                results.reformulation_path = ReformulationPath.cutting_plane
            else:
                results.reformulation_path = ReformulationPath.direct
            progress_logger.info(
                f"Reformulation path: {results.reformulation_path} "
                f"({len(direct)} reformulated, {len(separating)} separated "
                "uncertain constraints)"
            )
            if is_debug_set(logger):
                logger.debug("Deterministic program:\n%s", working.lp)

            final = self._solve_loop(working, separating, config, timing, results)

        results.time = timing.get_total_time("main")
        if final is not None:
            x, solver_results = final
            results.solver_results = solver_results
            results.objective_value = solver_results.incumbent_objective
            results.solution = np.array(x[: working.num_user_columns])
            for j, (policy, deps) in rd.adapt.items():
                if policy is not AdaptivePolicy.affine:
                    continue
                results.adaptive_policies[j] = AdaptivePolicyValue(
                    model.variables[j],
                    x[j],
                    {
                        rd.params[k]: (
                            x[working.aux_columns[j, k]]
                            if (j, k) in working.aux_columns
                            else 0.0
                        )
                        for k in deps
                    },
                )
            if config.load_solution:
                model.load_values(results.solution)

        self._log_termination(progress_logger, results, timing)

        tc = results.termination_condition
        if config.raise_exception_on_nonoptimal_result and (
            tc is not robustTerminationCondition.optimal
        ):
            if tc is robustTerminationCondition.max_iter:
                raise IterationLimitError(tc.message, results=results)
            raise SolverError(
                "Robust solve terminated with condition '%s': %s" % (tc, tc.message),
                results=results,
            )
        return results

    def _solve_loop(self, working, separating, config, timing, results):
        """Solve the deterministic program (re-solving as cuts are
        added); returns ``(x, solver_results)`` of the final solution"""
        progress_logger = config.progress_logger
        solver = config.solver
        IterationLogRecord.log_header(progress_logger.info)
        best = None
        iteration = 0
        while True:
            iteration += 1
            results.iterations = iteration
            solve_kwds = {}
            remaining = get_remaining_time(timing, config)
            if remaining is not None:
                solve_kwds['time_limit'] = remaining
            with time_code(timing, "main.solve"):
                solver_results = solver.solve(working.lp, **solve_kwds)
            results.solver_results = solver_results
            tc = robustTerminationCondition.from_solver_status(
                solver_results.termination_condition
            )
            if tc is not robustTerminationCondition.optimal:
                IterationLogRecord(
                    iteration, None, None, None, None, get_main_elapsed_time(timing)
                ).log(progress_logger.info)
                results.termination_condition = tc
                if tc is robustTerminationCondition.time_out and best is not None:
                    return best[1:]
                return None

            x = np.asarray(solver_results.primal, dtype=float)
            x.setflags(write=False)
            if not separating:
                IterationLogRecord(
                    iteration,
                    solver_results.incumbent_objective,
                    0,
                    0,
                    None,
                    get_main_elapsed_time(timing),
                ).log(progress_logger.info)
                results.termination_condition = tc
                return x, solver_results

            found = None
            remaining = get_remaining_time(timing, config)
            if remaining is None or remaining > 0:
                for oracle in {id(r.oracle): r.oracle for r in separating}.values():
                    oracle.time_limit = remaining
                try:
                    with time_code(timing, "main.separation"):
                        found = _separate_all(separating, x, config)
                except SeparationTimeLimitError as err:
                    logger.debug("%s", err)
            if found is None:
                IterationLogRecord(
                    iteration,
                    solver_results.incumbent_objective,
                    results.num_cuts,
                    None,
                    None,
                    get_main_elapsed_time(timing),
                ).log(progress_logger.info)
                results.termination_condition = robustTerminationCondition.time_out
                if best is None:
                    return x, solver_results
                return best[1:]
            violated = [(row, r) for row, r in zip(separating, found) if r is not None]
            max_violation = max((r.violation for _, r in violated), default=0.0)
            if best is None or max_violation < best[0]:
                best = (max_violation, x, solver_results)
            for row, realization in violated:
                cuts = results.cuts.setdefault(row.source, [])
                working.add_cut(
                    row,
                    realization.point,
                    "_cut[%s][%d]" % (row.source, len(cuts)),
                )
                cuts.append(realization)
            IterationLogRecord(
                iteration,
                solver_results.incumbent_objective,
                results.num_cuts,
                len(violated),
                max_violation,
                get_main_elapsed_time(timing),
            ).log(progress_logger.info)

            if not violated:
                results.termination_condition = tc
                return x, solver_results
            if config.max_iter != -1 and iteration >= config.max_iter:
                results.termination_condition = robustTerminationCondition.max_iter
                return best[1:]
            if (
                config.time_limit is not None
                and get_main_elapsed_time(timing) >= config.time_limit
            ):
                results.termination_condition = robustTerminationCondition.time_out
                return best[1:]

    def _log_termination(self, progress_logger, results, timing):
        tc = results.termination_condition
        progress_logger.info("-" * self._LOG_LINE_LENGTH)
        progress_logger.info(tc.message)
        progress_logger.info("-" * self._LOG_LINE_LENGTH)
        progress_logger.info("Timing breakdown:\n\n%s" % (timing,))
        progress_logger.info("-" * self._LOG_LINE_LENGTH)
        progress_logger.info(str(results))
        progress_logger.info("-" * self._LOG_LINE_LENGTH)
        progress_logger.info("All done. Exiting robust solver.")
        progress_logger.info("=" * self._LOG_LINE_LENGTH)


def solve_robust(model, **kwds):
    """Solve the robust counterpart of a :class:`RobustModel`

    Keyword arguments are the options of :func:`robust_config`
    (``solver``, ``separation_solver``, ``max_iter``, ``time_limit``,
    ``feasibility_tolerance``, ``separation_workers``, ``nominal_cuts``,
    ``raise_exception_on_nonoptimal_result``, ``load_solution``,
    ``progress_logger``).

    Returns
    -------
    RobustSolveResults
    """
    return RobustSolver().solve(model, **kwds)
