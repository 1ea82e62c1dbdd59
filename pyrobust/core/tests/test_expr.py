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

import numpy as np
from parameterized import parameterized

import pyrobust.common.unittest as unittest

from pyrobust.common.errors import (
    NonlinearExpressionError,
    OwnershipMismatchError,
    PyrobustException,
)
from pyrobust.core.expr import (
    FullAffExpr,
    LinearConstraint,
    LinearExpr,
    UncAffExpr,
    UncConstraint,
    UncSetConstraint,
    expressions_equal,
    inequality,
)
from pyrobust.core.expr.compare import canonical_form
from pyrobust.robust.model import RobustModel


class ExprTestBase(unittest.TestCase):
    def setUp(self):
        self.m = m = RobustModel('m')
        self.x = m.add_variable(name='x')
        self.y = m.add_variable(name='y')
        self.u = m.add_uncertain(-1, 1, name='u')
        self.w = m.add_uncertain(0, 2, name='w')


class TestExpressionKinds(ExprTestBase):
    def test_symbol_conversion(self):
        x, u = self.x, self.u
        self.assertIs(type(+x), LinearExpr)
        self.assertIs(type(+u), UncAffExpr)
        self.assertIs(type(x + 1), LinearExpr)
        self.assertIs(type(u + 1), UncAffExpr)
        self.assertIs(type(x + u), FullAffExpr)
        self.assertIs(type(u * x), FullAffExpr)
        self.assertIs(type(x * u), FullAffExpr)
        self.assertIs((x + u).model, self.m)

    def test_numeric_operands(self):
        x = self.x
        self.assertEqual(str(x * np.int64(3)), "3 x")
        self.assertEqual(str(x + np.float64(0.5)), "x + 0.5")
        self.assertEqual(str(4 - x), "-x + 4")

    def test_unsupported_operand(self):
        with self.assertRaises(TypeError):
            self.x + "a"
        with self.assertRaises(TypeError):
            self.u * None

    def test_bool(self):
        with self.assertRaisesRegex(
            PyrobustException, "Cannot convert non-constant expression 'x \\+ 1'"
        ):
            bool(self.x + 1)
        with self.assertRaisesRegex(PyrobustException, "chained inequality"):
            if self.x <= 1:
                pass

    def test_nonlinear(self):
        x, y, u, w = self.x, self.y, self.u, self.w
        with self.assertRaisesRegex(NonlinearExpressionError, "is not linear"):
            x * y
        with self.assertRaisesRegex(NonlinearExpressionError, "is not linear"):
            u * w
        with self.assertRaisesRegex(NonlinearExpressionError, "is not linear"):
            u * (u * x)
        with self.assertRaisesRegex(NonlinearExpressionError, "non-constant"):
            1 / x
        with self.assertRaisesRegex(NonlinearExpressionError, "non-constant"):
            x / u
        # NonlinearExpressionError is a TypeError
        with self.assertRaises(TypeError):
            (x + u) * (y + 1)

    def test_constant_products(self):
        x, y, u = self.x, self.y, self.u
        # term-free expressions behave as numbers
        self.assertEqual(str((x - x + 2) * y), "2 y")
        self.assertEqual(str((u - u + 3) * x), "3 x")
        self.assertEqual(str(x / (y - y + 4)), "0.25 x")
        # full expressions with numeric coefficients behave as linear ones
        e = u * x - u * x + 2 * x
        self.assertIsInstance(e * u, FullAffExpr)
        self.assertEqual(str(e * u), "(2 u) x")
        self.assertEqual(str(u * e), "(2 u) x")
        self.assertTrue(expressions_equal(e, 2 * x))
        with self.assertRaisesRegex(NonlinearExpressionError, "is not linear"):
            e * y

    def test_division(self):
        x, u = self.x, self.u
        self.assertEqual(str(x / 2), "0.5 x")
        self.assertEqual(str((u * x) / 4), "(0.25 u) x")
        with self.assertRaises(ZeroDivisionError):
            x / 0

    def test_ownership(self):
        other = RobustModel('other')
        z = other.add_variable(name='z')
        v = other.add_uncertain(name='v')
        with self.assertRaisesRegex(OwnershipMismatchError, "'m' and 'other'"):
            self.x + z
        with self.assertRaises(OwnershipMismatchError):
            self.u * z
        with self.assertRaises(OwnershipMismatchError):
            (self.u * self.x) + v
        # OwnershipMismatchError is a ValueError
        with self.assertRaises(ValueError):
            self.x <= z


class TestNormalization(ExprTestBase):
    def test_collapse(self):
        x, y = self.x, self.y
        e = x + 2 * y - x + 3 * x
        self.assertEqual(len(e.terms), 4)
        n = e.normalized()
        self.assertEqual([(v.name, c) for v, c in n.terms], [('x', 3.0), ('y', 2.0)])
        self.assertEqual(str(e), "3 x + 2 y")

    def test_zero_terms_removed(self):
        x, y = self.x, self.y
        e = (x + y - y).normalized()
        self.assertEqual([v.name for v, _ in e.terms], ['x'])
        self.assertTrue((x - x + 5).is_constant())
        self.assertFalse((x + 5).is_constant())

    @parameterized.expand(
        [
            ("tenths", 0.3, 0.1, 0.7, 0.2),
            ("mixed_signs", -0.1, 1.1, 2.2, -0.3),
            ("thirds", 1 / 3, 2 / 3, 1 / 7, 0.1),
        ]
    )
    def test_add_then_subtract(self, name, ca, ka, cb, kb):
        x, u = self.x, self.u
        for sym in (u, x, u * x):
            a = ca * sym + ka
            b = cb * sym + kb
            self.assertTrue(expressions_equal((a + b) - b, a))
            self.assertTrue(expressions_equal(b + a - b, a))
        self.assertEqual(((u + ka) + kb - kb).normalized().constant, ka)
        self.assertEqual((x + ka + kb - kb).split_constant()[1], ka)

    def test_full_collapse(self):
        x, u, w = self.x, self.u, self.w
        e = u * x + 2 * x + w * x - u * x
        n = e.normalized()
        self.assertEqual(len(n.terms), 1)
        self.assertEqual(str(e), "(w + 2) x")
        self.assertEqual(str(u * x - u * x + w), "w")

    def test_sum(self):
        x, y = self.x, self.y
        self.assertEqual(str(sum([x, y, x])), "2 x + y")
        self.assertEqual(str(sum(i * self.u for i in range(3))), "3 u")

    def test_is_equal(self):
        x, y, u = self.x, self.y, self.u
        self.assertTrue((2 * x + y + x).is_equal(3 * x + y))
        self.assertFalse((2 * x + y).is_equal(y + 2 * x))
        self.assertFalse((2 * x + y).is_equal(2 * x + y + 1))
        self.assertTrue(expressions_equal(x - x + 1, 1))
        self.assertFalse(expressions_equal(x, u))
        self.assertTrue(expressions_equal((1 + u) * x, x + u * x))

    def test_canonical_form(self):
        x, u = self.x, self.u
        self.assertEqual(canonical_form(5), ('constant', 5.0))
        self.assertEqual(
            canonical_form(2 * x + 1),
            ('linear', ((('Variable', 0, 'x'), 2.0),), 1.0),
        )
        self.assertEqual(
            canonical_form(u * x - u),
            (
                'full',
                (
                    (
                        ('Variable', 0, 'x'),
                        ('uncertain', ((('UncertainParam', 0, 'u'), 1.0),), 0.0),
                    ),
                ),
                ('uncertain', ((('UncertainParam', 0, 'u'), -1.0),), 0.0),
            ),
        )
        self.assertExpressionsEqual(x + x + u * x, (2 + u) * x)
        self.assertExpressionsEqual(0.1 * x + 0.2 * x, 0.3 * x, places=7)
        with self.assertRaisesRegex(AssertionError, "Expressions not equal"):
            self.assertExpressionsEqual(x + 1, x + 2)


class TestPrinting(ExprTestBase):
    def test_linear(self):
        x, y = self.x, self.y
        self.assertEqual(str(x + 2 * y), "x + 2 y")
        self.assertEqual(str(x - 2 * y), "x - 2 y")
        self.assertEqual(str(-x + 3), "-x + 3")
        self.assertEqual(str(-x - 1.5), "-x - 1.5")
        self.assertEqual(str(2.5 * x), "2.5 x")
        self.assertEqual(str(x - x), "0")
        self.assertEqual(str(x - x + 7), "7")
        self.assertEqual(LinearExpr(2, [(x, 1), (y, -1)]).to_string(), "x - y + 2")
        self.assertEqual(LinearExpr(2, [(x, 1)]).to_string(show_constant=False), "x")

    def test_small_constants(self):
        u = self.u
        self.assertEqual(str(u + 1e-7), "u")
        self.assertEqual(str(u + 2), "u + 2")
        self.assertEqual(str(u - 1e-3), "u - 0.001")

    def test_full(self):
        x, y, u, w = self.x, self.y, self.u, self.w
        self.assertEqual(str(u * x), "u x")
        self.assertEqual(str(x * u), "u x")
        self.assertEqual(str(-u * x), "-u x")
        self.assertEqual(str((2 * u) * x), "(2 u) x")
        self.assertEqual(str((u + 1) * x), "(u + 1) x")
        self.assertEqual(str((u - w) * x + 3 * y), "(u - w) x + 3 y")
        self.assertEqual(str(x - u), "x - u")
        self.assertEqual(str(x + u + 1), "x + u + 1")
        self.assertEqual(str(u * x - 2), "u x - 2")

    def test_constraints(self):
        x, y, u, w = self.x, self.y, self.u, self.w
        self.assertEqual(str(x + 2 * y <= 3), "x + 2 y <= 3")
        self.assertEqual(str(x >= 1 + u), "x - u >= 1")
        self.assertEqual(str(x == 2), "x == 2")
        self.assertEqual(str(2 * x + 1 <= y), "2 x - y <= -1")
        self.assertEqual(str(u + w <= 1.5), "u + w <= 1.5")
        self.assertEqual(str(inequality(0, x + y, 4)), "0 <= x + y <= 4")
        self.assertEqual(str(inequality(None, u * x, 4)), "u x <= 4")


class TestConstraints(ExprTestBase):
    def test_types(self):
        x, u, w = self.x, self.u, self.w
        self.assertIs(type(x <= 1), LinearConstraint)
        self.assertIs(type(u + w <= 1), UncSetConstraint)
        self.assertIs(type(u * x <= 1), UncConstraint)
        self.assertIs(type(x >= u), UncConstraint)
        self.assertIs(type(1 <= x), LinearConstraint)

    def test_bounds(self):
        x, u = self.x, self.u
        con = x >= 1 + u
        self.assertEqual(con.lower, 1)
        self.assertEqual(con.upper, float('inf'))
        self.assertTrue(con.has_lb())
        self.assertFalse(con.has_ub())
        self.assertFalse(con.equality)
        # the numeric constant is moved into the bounds
        self.assertEqual(con.body.constant.constant, 0)
        con = x + 3 == 5
        self.assertTrue(con.equality)
        self.assertEqual((con.lower, con.upper), (2, 2))
        self.assertIs(con.model, self.m)

    def test_reversed_comparison(self):
        x = self.x
        con = 2 >= x
        self.assertEqual(str(con), "x <= 2")
        con = 2 <= x + 1
        self.assertEqual(str(con), "x >= 1")

    def test_inequality_errors(self):
        x = self.x
        with self.assertRaisesRegex(TypeError, "bounds must be numeric"):
            inequality('a', x, 1)
        with self.assertRaisesRegex(TypeError, "body must be a variable"):
            inequality(0, 1, 2)
        with self.assertRaisesRegex(TypeError, "body must be a variable"):
            inequality(0, 'x', 2)


class TestEvaluation(ExprTestBase):
    def test_linear(self):
        x, y = self.x, self.y
        e = 2 * x - y + 1
        self.assertEqual(e.evaluate({x: 3, y: 1}), 6)
        self.assertEqual(e.evaluate([3, 1]), 6)
        x.value = 1
        y.value = 2
        self.assertEqual(e.evaluate(), 1)

    def test_uncertain(self):
        u, w = self.u, self.w
        e = 3 * u - w + 0.5
        self.assertEqual(e.evaluate({u: 1, w: 2}), 1.5)
        self.assertEqual(e.evaluate([1, 2]), 1.5)
        self.assertEqual(e.parameters()[0].name, 'u')

    def test_specialize(self):
        x, y, u, w = self.x, self.y, self.u, self.w
        e = u * x + 2 * u + (w - 1) * y
        lin = e.specialize({u: 3, w: 1})
        self.assertIs(type(lin), LinearExpr)
        self.assertEqual(str(lin), "3 x + 6")
        self.assertEqual(e.evaluate([3, 1], [1, 5]), 9)
        self.assertEqual([v.name for v in e.variables()], ['x', 'y'])
        self.assertEqual([p.name for p in e.parameters()], ['u', 'w'])

    def test_from_constants(self):
        exprs = UncAffExpr.from_constants([1, 2.5])
        self.assertEqual(len(exprs), 2)
        self.assertTrue(all(type(e) is UncAffExpr for e in exprs))
        self.assertEqual([e.constant for e in exprs], [1.0, 2.5])
        self.assertEqual([e.terms for e in exprs], [[], []])


class TestConstructors(ExprTestBase):
    def test_explicit(self):
        x, u = self.x, self.u
        e = FullAffExpr([(x, UncAffExpr(1, [(u, 2)]))], 3)
        self.assertEqual(str(e), "(2 u + 1) x + 3")
        self.assertIs(e.model, self.m)
        e = FullAffExpr([(x, 4)])
        self.assertEqual(str(e), "4 x")
        self.assertIsNone(LinearExpr(5).model)

    def test_explicit_ownership(self):
        other = RobustModel('other')
        v = other.add_uncertain(name='v')
        with self.assertRaises(OwnershipMismatchError):
            FullAffExpr([(self.x, UncAffExpr(0, [(v, 1)]))])
        with self.assertRaises(OwnershipMismatchError):
            UncAffExpr(0, [(self.u, 1), (v, 1)])


if __name__ == "__main__":
    unittest.main()
