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

import math

import numpy as np
from parameterized import parameterized

import pyrobust.common.unittest as unittest

from pyrobust.common.errors import DeveloperError, SeparationError, SetupError
from pyrobust.core import Integers
from pyrobust.repn.standard_repn import MixedRepn, UncertainRepn
from pyrobust.robust import (
    AuxRow,
    AuxVar,
    CuttingPlaneOracle,
    PolyhedralOracle,
    Realization,
    Reformulation,
    RobustModel,
    UncertaintySet,
)
from pyrobust.robust.config import robust_config
from pyrobust.robust.working_model import MixedRow, WorkingModel
from pyrobust.solvers import SolverFactory, TerminationCondition


def _budget_model(x0, x1):
    """(1 + u0) x0 + (2 + u1) x1 <= 4 for all u in [-1, 1]^2 with
    u0 + u1 <= 1, with the variables fixed at (x0, x1)"""
    m = RobustModel('budget')
    x = [
        m.add_variable(lb=x0, ub=x0, name='x0'),
        m.add_variable(lb=x1, ub=x1, name='x1'),
    ]
    u = m.add_uncertain_array(2, -1, 1, 'u')
    m.add_constraint(u[0] + u[1] <= 1)
    m.add_constraint((1 + u[0]) * x[0] + (2 + u[1]) * x[1] <= 4)
    return m


class TestDataClasses(unittest.TestCase):
    def test_aux(self):
        var = AuxVar()
        self.assertEqual((var.lower, var.upper), (-math.inf, math.inf))
        var = AuxVar(0, None, 'y')
        self.assertEqual(repr(var), "AuxVar(0.0, inf, 'y')")
        row = AuxRow([(0, 1), (var, -1)], None, 3)
        self.assertEqual(row.lower, -math.inf)
        self.assertEqual(row.upper, 3.0)
        self.assertEqual(len(Reformulation(constraints=[row])), 1)
        self.assertEqual(Reformulation().variables, [])

    def test_realization(self):
        m = RobustModel()
        m.add_uncertain(name='u')
        w = m.add_uncertain(name='w')
        r = Realization([1, 2.5], 0.25, 'lower')
        self.assertEqual(r[w], 2.5)
        self.assertEqual(r[0], 1.0)
        self.assertEqual(len(r), 2)
        self.assertEqual(
            repr(r), "Realization([1.0, 2.5], violation=0.25, side='lower')"
        )

    def test_inject(self):
        m = _budget_model(1, 1)
        working = WorkingModel.build(m)
        y = AuxVar(0, None, 'y')
        cols = working.inject(
            Reformulation([y], [AuxRow([(0, 1.0), (y, 2.0), (y, 1.0)], 1, None, 'r')])
        )
        self.assertEqual(cols, {id(y): 2})
        self.assertEqual(working.lp.col_names[2], 'y')
        self.assertEqual(working.lp.rows[-1], {0: 1.0, 2: 3.0})
        # the user model is not modified
        self.assertEqual(m.num_variables, 2)
        stray = AuxVar(name='stray')
        with self.assertRaisesRegex(
            DeveloperError,
            "references auxiliary variable 'stray' that is not part of the",
            normalize_whitespace=True,
        ):
            working.inject(Reformulation(constraints=[AuxRow([(stray, 1.0)], 0)]))


class TestPolyhedralOracle(unittest.TestCase):
    def _reformulate(self, m):
        working = WorkingModel.build(m)
        oracle = PolyhedralOracle()
        oracle.setup(UncertaintySet.from_model(m), robust_config())
        return working, oracle.reformulate(working.mixed_rows[0])

    @parameterized.expand(
        [
            ("binding", (1, 1), True),
            ("slack", (0, 1), True),
            ("violated_at_vertex", (2, 1), False),
            ("violated_on_budget_row", (1, 1.5), False),
        ]
    )
    @unittest.pytest.mark.solver('highs')
    def test_dualization(self, name, x, feasible):
        working, reform = self._reformulate(_budget_model(*x))
        working.inject(reform)
        res = SolverFactory('highs').solve(working.lp)
        if feasible:
            self.assertEqual(res.termination_condition, TerminationCondition.optimal)
        else:
            self.assertIn(
                res.termination_condition,
                (
                    TerminationCondition.infeasible,
                    TerminationCondition.infeasibleOrUnbounded,
                ),
            )

    def test_component_restriction(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain_array(2, -1, 1, 'u')
        m.add_uncertain(0, 1, 'v')
        m.add_constraint(u[0] + u[1] <= 1)
        m.add_constraint(x + u[0] * x <= 2)
        working, reform = self._reformulate(m)
        # one row multiplier and two bound multipliers per parameter
        self.assertEqual(len(reform.variables), 5)
        self.assertEqual(len(reform.constraints), 3)
        self.assertEqual(
            [row.name for row in reform.constraints],
            ['_dual[0].ub.obj', '_dual[0].ub.dual[0]', '_dual[0].ub.dual[1]'],
        )
        self.assertFalse(any('[2]' in var.name for var in reform.variables))
        obj = reform.constraints[0]
        self.assertEqual(obj.upper, 2.0)
        self.assertEqual(obj.terms[0], (0, 1.0))

    def test_two_sided(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain(0, 1, 'u')
        m.add_constraint(x - u == 0)
        working, reform = self._reformulate(m)
        names = [row.name for row in reform.constraints]
        self.assertEqual(
            names,
            [
                '_dual[0].ub.obj',
                '_dual[0].ub.dual[0]',
                '_dual[0].lb.obj',
                '_dual[0].lb.dual[0]',
            ],
        )
        # no dual variable for an infinite bound
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain(None, 1, 'u')
        m.add_constraint(x + u <= 2)
        working, reform = self._reformulate(m)
        self.assertEqual([v.name for v in reform.variables], ['_dual[0].ub.w_up[0]'])

    def test_deterministic_row(self):
        m = RobustModel()
        m.add_variable(name='x')
        oracle = PolyhedralOracle()
        oracle.setup(UncertaintySet.from_model(m), robust_config())
        row = MixedRow(
            MixedRepn({0: UncertainRepn(constant=2)}, UncertainRepn(constant=1)),
            None,
            4,
            'r',
            oracle,
            0,
        )
        reform = oracle.reformulate(row)
        self.assertEqual(reform.variables, [])
        self.assertEqual(len(reform.constraints), 1)
        self.assertEqual(reform.constraints[0].terms, [(0, 2.0)])
        self.assertEqual(reform.constraints[0].upper, 3.0)
        self.assertIsNone(oracle.separate(row, np.zeros(1)))

    def test_integer_parameters(self):
        m = RobustModel()
        m.add_uncertain(0, 3, 'k', Integers)
        with self.assertRaisesRegex(SetupError, "integer uncertain parameters \\(k\\)"):
            PolyhedralOracle().setup(UncertaintySet.from_model(m), robust_config())

    @unittest.pytest.mark.solver('highs')
    def test_empty_set(self):
        # u is untouched by the set constraint, v has no feasible value
        m = RobustModel()
        m.add_uncertain(-1, 1, 'u')
        v = m.add_uncertain(0, 1, 'v')
        m.add_constraint(v >= 2)
        uset = UncertaintySet.from_model(m)
        for oracle in (PolyhedralOracle(), CuttingPlaneOracle()):
            with self.assertRaisesRegex(SetupError, "uncertainty set is empty"):
                oracle.setup(uset, robust_config())

    def test_box_needs_no_solve(self):
        m = RobustModel()
        m.add_uncertain_array(2, -1, 1, 'u')
        sep = unittest.mock.Mock()
        config = robust_config()(dict(separation_solver=sep))
        PolyhedralOracle().setup(UncertaintySet.from_model(m), config)
        sep.solve.assert_not_called()

    @unittest.pytest.mark.solver('highs')
    def test_prefer_cuts(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        k = m.add_uncertain(0, 3, 'k', Integers)
        m.add_constraint(x >= k)
        oracle = PolyhedralOracle(prefer_cuts=True)
        self.assertTrue(oracle.uses_separation)
        self.assertFalse(PolyhedralOracle().uses_separation)
        oracle.setup(UncertaintySet.from_model(m), robust_config())
        row = WorkingModel.build(m).mixed_rows[0]
        r = oracle.separate(row, np.array([1.0]))
        self.assertAlmostEqual(r.violation, 2)
        self.assertAlmostEqual(r[k], 3)


@unittest.pytest.mark.solver('highs')
class TestCuttingPlaneOracle(unittest.TestCase):
    def _setup(self, m, **kwds):
        oracle = CuttingPlaneOracle(**kwds)
        uset = UncertaintySet.from_model(m)
        oracle.setup(uset, robust_config())
        return oracle, uset, WorkingModel.build(m).mixed_rows[0]

    def test_nominal(self):
        oracle, uset, row = self._setup(_budget_model(1, 1))
        self.assertTrue(uset.point_in_set(oracle.nominal_point, tol=1e-7))
        reform = oracle.reformulate(row)
        self.assertEqual(reform.variables, [])
        self.assertEqual(len(reform.constraints), 1)
        self.assertTrue(reform.constraints[0].name.endswith('_nominal'))

    def test_separate(self):
        oracle, uset, row = self._setup(_budget_model(1, 1), solver='highs')
        self.assertIsNone(oracle.separate(row, np.array([1.0, 1.0])))
        self.assertIsNone(oracle.separate(row, np.array([0.0, 1.0])))

        r = oracle.separate(row, np.array([2.0, 1.0]))
        self.assertEqual(r.side, 'upper')
        self.assertAlmostEqual(r.violation, 2)
        self.assertStructuredAlmostEqual(r.point, [1, 0], abstol=1e-7)

        r = oracle.separate(row, np.array([1.0, 1.5]))
        self.assertAlmostEqual(r.violation, 1.5)
        self.assertStructuredAlmostEqual(r.point, [0, 1], abstol=1e-7)

    def test_separate_lower(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain(-1, 1, 'u')
        m.add_constraint(x >= u)
        oracle, uset, row = self._setup(m)
        r = oracle.separate(row, np.array([0.5]))
        self.assertEqual(r.side, 'lower')
        self.assertAlmostEqual(r.violation, 0.5)
        self.assertAlmostEqual(r[u], 1)
        self.assertIsNone(oracle.separate(row, np.array([1.0])))

    def test_tolerance(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain(-1, 1, 'u')
        m.add_constraint(x >= u)
        oracle = CuttingPlaneOracle()
        config = robust_config()({'feasibility_tolerance': 0.1})
        oracle.setup(UncertaintySet.from_model(m), config)
        row = WorkingModel.build(m).mixed_rows[0]
        self.assertIsNone(oracle.separate(row, np.array([0.95])))
        self.assertIsNotNone(oracle.separate(row, np.array([0.8])))

    def test_no_parameters(self):
        oracle = CuttingPlaneOracle()
        oracle.setup(UncertaintySet([], []), robust_config())
        self.assertEqual(len(oracle.nominal_point), 0)

    def test_empty_set(self):
        uset = UncertaintySet([0], [1], A_ub=[[-1]], b_ub=[-2])
        with self.assertRaises(SetupError):
            CuttingPlaneOracle().setup(uset, robust_config())

    def test_unbounded_separation(self):
        m = RobustModel()
        x = m.add_variable(name='x')
        u = m.add_uncertain(name='u')
        m.add_constraint(u * x <= 1)
        oracle, uset, row = self._setup(m)
        with self.assertRaises(SeparationError):
            oracle.separate(row, np.array([1.0]))


if __name__ == "__main__":
    unittest.main()
