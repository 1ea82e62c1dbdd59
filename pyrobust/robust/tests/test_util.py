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

import logging

import pyrobust.common.unittest as unittest

from pyrobust.robust.config import (
    SolverResolvable,
    logger_domain,
    positive_int_or_minus_one,
    robust_config,
)
from pyrobust.robust.results import (
    ReformulationPath,
    RobustSolveResults,
    robustTerminationCondition,
)
from pyrobust.robust.util import (
    IterationLogRecord,
    TimingData,
    get_main_elapsed_time,
    get_remaining_time,
    time_code,
)
from pyrobust.solvers import SolverFactory, TerminationCondition


class TestTimingData(unittest.TestCase):
    def test_time_code(self):
        timing = TimingData()
        with time_code(timing, "main", is_main_timer=True):
            self.assertIsNotNone(timing.main_timer_start_time)
            with time_code(timing, "main.solve"):
                pass
            with time_code(timing, "main.solve"):
                pass
            self.assertGreaterEqual(get_main_elapsed_time(timing), 0)
        self.assertEqual(timing.get_num_calls("main"), 1)
        self.assertEqual(timing.get_num_calls("main.solve"), 2)
        self.assertGreaterEqual(
            timing.get_total_time("main"), timing.get_total_time("main.solve")
        )
        self.assertIn("solve", str(timing))

    def test_invalid_identifier(self):
        timing = TimingData()
        with self.assertRaisesRegex(
            ValueError, "does not support timing ID: main.bogus"
        ):
            timing.start_timer("main.bogus")
        with self.assertRaisesRegex(ValueError, "does not support timing ID: solve"):
            timing.stop_timer("solve")

    def test_remaining_time(self):
        timing = TimingData()
        config = robust_config()
        with time_code(timing, "main", is_main_timer=True):
            self.assertIsNone(get_remaining_time(timing, config))
            config.time_limit = 1000
            remaining = get_remaining_time(timing, config)
            self.assertLessEqual(remaining, 1000)
            self.assertGreater(remaining, 900)
            config.time_limit = 0
            self.assertEqual(get_remaining_time(timing, config), 0)


class TestIterationLogRecord(unittest.TestCase):
    def test_header(self):
        header = IterationLogRecord.get_log_header_str()
        self.assertTrue(header.startswith("Itn  Objective    #Cuts   #CViol  "))
        self.assertTrue(header.endswith("Wall Time (s)"))
        lines = []
        IterationLogRecord.log_header(lines.append)
        self.assertEqual(lines, ["-" * 78, header, "-" * 78])
        lines = []
        IterationLogRecord.log_header(lines.append, with_rules=False)
        self.assertEqual(lines, [header])

    def test_record(self):
        record = IterationLogRecord(3, 12.5, 2, 1, 0.125, 1.5)
        self.assertEqual(
            record.get_log_str(),
            "3    "
            " 1.2500e+01  "
            "2       "
            "1       "
            "1.2500e-01   "
            "1.500        ",
        )

    def test_missing_values(self):
        record = IterationLogRecord(2, None, None, None, None, 0.25)
        lines = []
        record.log(lines.append)
        self.assertEqual(
            lines[0],
            "2    "
            "-            "
            "-       "
            "-       "
            "-            "
            "0.250        ",
        )


class TestResults(unittest.TestCase):
    def test_messages(self):
        tc = robustTerminationCondition
        self.assertEqual(tc.optimal.message, "Robust optimal solution identified.")
        self.assertEqual(tc.infeasible.message, "Problem is robust infeasible.")
        self.assertEqual(tc.max_iter.message, "Cutting-plane iteration limit reached.")
        for cond in tc:
            self.assertTrue(cond.message)
        self.assertEqual(str(tc.time_out), 'time_out')
        self.assertEqual(str(ReformulationPath.hybrid), 'hybrid')

    def test_from_solver_status(self):
        tc = robustTerminationCondition
        self.assertIs(
            tc.from_solver_status(TerminationCondition.optimal), tc.optimal
        )
        self.assertIs(
            tc.from_solver_status(TerminationCondition.infeasibleOrUnbounded),
            tc.infeasible_or_unbounded,
        )
        self.assertIs(
            tc.from_solver_status(TerminationCondition.maxTimeLimit), tc.time_out
        )
        self.assertIs(
            tc.from_solver_status(TerminationCondition.iterationLimit), tc.error
        )
        self.assertIs(tc.from_solver_status(TerminationCondition.unknown), tc.error)

    def test_str(self):
        res = RobustSolveResults(
            termination_condition=robustTerminationCondition.optimal,
            reformulation_path=ReformulationPath.direct,
            iterations=1,
            time=0.5,
            objective_value=2,
        )
        self.assertEqual(
            str(res),
            "Termination stats:\n"
            " Iterations            : 1\n"
            " Solve time (wall s)   : 0.500\n"
            " Final objective value : 2.0000e+00\n"
            " Reformulation path    : direct\n"
            " Termination condition : optimal",
        )
        self.assertEqual(res.num_cuts, 0)
        self.assertIn("Final objective value : None", str(RobustSolveResults()))


class TestConfigDomains(unittest.TestCase):
    def test_positive_int_or_minus_one(self):
        self.assertEqual(positive_int_or_minus_one(3), 3)
        self.assertEqual(positive_int_or_minus_one(-1), -1)
        self.assertEqual(positive_int_or_minus_one(2.0), 2)
        for val in (0, -2, 1.5):
            with self.assertRaisesRegex(ValueError, "Expected positive int or -1"):
                positive_int_or_minus_one(val)

    def test_logger_domain(self):
        logger = logging.getLogger('pyrobust.robust.tests')
        self.assertIs(logger_domain(logger), logger)
        self.assertIs(logger_domain('pyrobust.robust.tests'), logger)

    def test_solver_resolvable(self):
        domain = SolverResolvable()
        opt = domain('HIGHS')
        self.assertEqual(opt.name, 'highs')
        self.assertIs(domain(opt), opt)
        self.assertEqual(domain.domain_name(), "str or Solver")
        with self.assertRaisesRegex(
            TypeError, "to a solver for use as separation solver"
        ):
            SolverResolvable("separation solver")(5)

    def test_config_defaults(self):
        config = robust_config()
        self.assertEqual(config.solver.name, 'highs')
        self.assertIs(type(config.solver), SolverFactory.get_class('highs'))
        self.assertEqual(config.max_iter, 100)
        config.max_iter = -1
        self.assertEqual(config.max_iter, -1)
        config.progress_logger = 'pyrobust.robust.tests'
        self.assertIsInstance(config.progress_logger, logging.Logger)


if __name__ == "__main__":
    unittest.main()
