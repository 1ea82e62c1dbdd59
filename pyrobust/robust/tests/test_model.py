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

from io import StringIO
import math

import numpy as np

import pyrobust.common.unittest as unittest

from pyrobust.common.errors import OwnershipMismatchError, TypeMismatchError
from pyrobust.core import Binary, Integers, Model
from pyrobust.core.expr.relational_expr import LinearConstraint, UncConstraint
from pyrobust.robust import (
    AdaptivePolicy,
    CuttingPlaneOracle,
    PolyhedralOracle,
    RobustModel,
    get_robust_data,
)


class TestUncertainParams(unittest.TestCase):
    def test_defaults(self):
        m = RobustModel()
        u = m.add_uncertain()
        self.assertEqual(u.name, '_unc0')
        self.assertEqual(u.index, 0)
        self.assertEqual(u.bounds, (-math.inf, math.inf))
        self.assertFalse(u.is_integer())
        self.assertIs(u.model, m)
        u.name = 'u'
        self.assertEqual(str(u), 'u')
        self.assertEqual(m.num_uncertain_params, 1)
        self.assertIs(m.uncertain_params[0], u)

    def test_bounds(self):
        m = RobustModel()
        u = m.add_uncertain(-1, 1, 'u')
        u.lower = 0
        u.upper = None
        self.assertEqual(u.bounds, (0, math.inf))
        with self.assertRaisesRegex(
            ValueError, r"Lower bound \(5.0\) of uncertain parameter 'w'"
        ):
            m.add_uncertain(5, 4, 'w')
        u.upper = 2
        with self.assertRaisesRegex(ValueError, "is greater than its upper"):
            u.lower = 3
        with self.assertRaisesRegex(ValueError, "is less than its lower"):
            u.upper = -1
        self.assertEqual(u.bounds, (0, 2))

    def test_domain(self):
        m = RobustModel()
        b = m.add_uncertain(domain=Binary, name='b')
        self.assertEqual(b.bounds, (0, 1))
        self.assertTrue(b.is_integer())
        k = m.add_uncertain(-2.5, None, domain=Integers)
        self.assertIs(k.domain, Integers)
        with self.assertRaisesRegex(TypeError, "must be a RealDomain"):
            m.add_uncertain(domain=float)

    def test_array(self):
        m = RobustModel()
        us = m.add_uncertain_array(3, 0, 1, 'd')
        self.assertEqual([u.name for u in us], ['d[0]', 'd[1]', 'd[2]'])
        self.assertEqual([u.index for u in us], [0, 1, 2])
        self.assertEqual(us[2].bounds, (0, 1))


class TestRobustModel(unittest.TestCase):
    def setUp(self):
        self.m = m = RobustModel('m')
        self.x = m.add_variable(lb=0, name='x')
        self.y = m.add_variable(name='y')
        self.u = m.add_uncertain(-1, 1, 'u')
        self.w = m.add_uncertain(0, 2, 'w')

    def test_constraint_routing(self):
        m, x, u, w = self.m, self.x, self.u, self.w
        con = m.add_constraint(x >= 1 + u)
        self.assertIsInstance(con, UncConstraint)
        self.assertIs(m.uncertain_constraints[0], con)
        self.assertIsNone(m.add_constraint(u + w <= 2))
        self.assertEqual(len(m.uncertainty_set_constraints), 1)
        det = m.add_constraint(x + self.y <= 3)
        self.assertIsInstance(det, LinearConstraint)
        self.assertIs(m.constraints[0], det)
        self.assertEqual(len(m.uncertain_constraints), 1)

    def test_constraint_oracle(self):
        m, x, u = self.m, self.x, self.u
        oracle = CuttingPlaneOracle()
        m.add_constraint(x >= u, oracle)
        m.add_constraint(x >= 2 * u)
        rd = get_robust_data(m)
        self.assertIs(rd.oracles[0], oracle)
        self.assertIsNone(rd.oracles[1])
        self.assertIsInstance(rd.default_oracle, PolyhedralOracle)
        with self.assertRaisesRegex(TypeMismatchError, "Expected an Oracle"):
            m.add_constraint(x >= u, 'cuts')
        with self.assertRaisesRegex(
            TypeMismatchError, "An oracle can only be given for constraints"
        ):
            m.add_constraint(x <= 5, oracle)
        with self.assertRaisesRegex(
            TypeMismatchError, "An oracle can only be given for constraints"
        ):
            m.add_constraint(u <= 5, oracle)
        with self.assertRaisesRegex(TypeError, "cannot add object of type str"):
            m.add_constraint('x >= 0')

    def test_default_oracle(self):
        oracle = CuttingPlaneOracle()
        m = RobustModel(default_oracle=oracle)
        self.assertIs(m.robust_data.default_oracle, oracle)
        m.set_default_oracle(PolyhedralOracle())
        self.assertIsInstance(m.robust_data.default_oracle, PolyhedralOracle)
        with self.assertRaisesRegex(TypeMismatchError, "must be an Oracle"):
            m.set_default_oracle(None)
        with self.assertRaisesRegex(TypeMismatchError, "must be an Oracle"):
            RobustModel(default_oracle='cuts')

    def test_ownership(self):
        other = RobustModel('other')
        v = other.add_variable(name='v')
        p = other.add_uncertain(name='p')
        with self.assertRaises(OwnershipMismatchError):
            self.m.add_constraint(v >= p)
        with self.assertRaises(OwnershipMismatchError):
            self.m.add_constraint(p <= 1)
        with self.assertRaises(OwnershipMismatchError):
            self.m.set_adapt(self.y, 'affine', [p])
        with self.assertRaises(OwnershipMismatchError):
            self.m.get_adapt(v)

    def test_uncertain_objective(self):
        m, x, u = self.m, self.x, self.u
        m.set_objective((1 + u) * x)
        self.assertEqual(m.objective.kind, 'full')
        m.set_objective(3)
        self.assertEqual(m.objective.kind, 'linear')
        self.assertEqual(m.objective.constant, 3)

    def test_get_robust_data(self):
        self.assertIs(get_robust_data(self.m), self.m.robust_data)
        with self.assertRaisesRegex(
            TypeMismatchError, "only available for RobustModels .received Model"
        ):
            get_robust_data(Model())


class TestAdaptive(unittest.TestCase):
    def setUp(self):
        self.m = m = RobustModel('m')
        self.x = m.add_variable(name='x')
        self.ys = m.add_variable_array(2, name='y')
        self.k = m.add_variable(domain=Integers, name='k')
        self.u = m.add_uncertain(-1, 1, 'u')
        self.w = m.add_uncertain(0, 2, 'w')

    def test_default_fixed(self):
        policy, deps = self.m.get_adapt(self.x)
        self.assertIs(policy, AdaptivePolicy.fixed)
        self.assertEqual(deps, [])

    def test_affine(self):
        m, u, w = self.m, self.u, self.w
        m.set_adapt(self.ys, 'affine', [w, u, w])
        for y in self.ys:
            policy, deps = m.get_adapt(y)
            self.assertIs(policy, AdaptivePolicy.affine)
            self.assertEqual([p.index for p in deps], [1, 0])
        m.set_adapt(self.ys[0], AdaptivePolicy.affine, u)
        self.assertEqual([p.name for p in m.get_adapt(self.ys[0])[1]], ['u'])
        # reverting to a fixed policy
        m.set_adapt(self.ys[0])
        self.assertIs(m.get_adapt(self.ys[0])[0], AdaptivePolicy.fixed)
        self.assertEqual(sorted(m.robust_data.adapt), [self.ys[1].index])

    def test_nested_containers(self):
        m = self.m
        ys = np.array(self.ys, dtype=object)
        m.set_adapt({'a': [self.x], 'b': ys}, 'AFFINE', (self.u,))
        self.assertEqual(sorted(m.robust_data.adapt), [0, 1, 2])

    def test_errors(self):
        m, u = self.m, self.u
        with self.assertRaisesRegex(
            TypeMismatchError, "Unrecognized adaptability type 'quadratic'"
        ):
            m.set_adapt(self.x, 'quadratic', [u])
        with self.assertRaisesRegex(
            TypeMismatchError, "A fixed policy cannot depend on uncertain"
        ):
            m.set_adapt(self.x, 'fixed', [u])
        with self.assertRaisesRegex(
            TypeMismatchError, "can only depend on uncertain parameters"
        ):
            m.set_adapt(self.x, 'affine', [self.ys[0]])
        with self.assertRaisesRegex(
            TypeMismatchError, "Only variables can be made adaptive"
        ):
            m.set_adapt([self.x, u], 'affine', [u])
        with self.assertRaisesRegex(
            TypeMismatchError, "Integer variable 'k' cannot follow an affine"
        ):
            m.set_adapt(self.k, 'affine', [u])
        # failed declarations leave the model unchanged
        self.assertEqual(m.robust_data.adapt, {})


class TestPprint(unittest.TestCase):
    def test_pprint(self):
        m = RobustModel()
        x = m.add_variable(lb=0, name='x')
        u = m.add_uncertain(-1, 1, 'u')
        w = m.add_uncertain(0, 2, 'w')
        m.add_constraint(x >= 1 + u)
        m.add_constraint(u + w <= 2)
        m.set_objective(x)
        OUT = StringIO()
        m.pprint(ostream=OUT)
        self.assertEqual(
            OUT.getvalue(),
            "minimize x\n"
            "Subject to\n"
            " x >= 0\n"
            "Uncertain constraints:\n"
            " x - u >= 1\n"
            "Uncertainty set:\n"
            " u + w <= 2\n"
            " -1 <= u <= 1\n"
            " 0 <= w <= 2\n",
        )

    def test_pprint_adaptive(self):
        m = RobustModel()
        y = m.add_variable(name='y')
        u = m.add_uncertain(-1, 1, 'u')
        b = m.add_uncertain(domain=Binary, name='b')
        m.set_adapt(y, 'affine', [u, b])
        OUT = StringIO()
        m.pprint(ostream=OUT)
        self.assertEqual(
            OUT.getvalue(),
            "minimize 0\n"
            "Subject to\n"
            " y free\n"
            "Uncertainty set:\n"
            " -1 <= u <= 1\n"
            " 0 <= b <= 1, Binary\n"
            "Adaptive variables:\n"
            " y: affine in (u, b)\n",
        )


if __name__ == "__main__":
    unittest.main()
