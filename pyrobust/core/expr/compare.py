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

from pyrobust.core.expr.numeric_expr import _reduce, as_expression


def _symbol_key(sym):
    return (type(sym).__name__, sym.index, sym.name)


def canonical_form(expr):
    """Return a nested tuple representation of the normalized expression

    Symbols are represented by ``(type name, index, name)`` so that the
    result can be compared with ``==`` (comparing symbols directly would
    build constraints).

    """
    e = _reduce(as_expression(expr))
    if e.__class__ is float:
        return ('constant', e)
    if e.kind == 'full':
        return (
            'full',
            tuple((_symbol_key(v), canonical_form(c)) for v, c in e.terms),
            canonical_form(e.constant),
        )
    return (e.kind, tuple((_symbol_key(s), c) for s, c in e.terms), e.constant)


def _flatten(form, ans):
    for item in form:
        if type(item) is tuple:
            _flatten(item, ans)
        else:
            ans.append(item)
    return ans


def assertExpressionsEqual(test, a, b, places=None):
    """unittest-based assertion for comparing expressions

    This converts the expressions `a` and `b` into canonical form and
    then compares the resulting (flattened) lists.

    Parameters
    ----------
    test: unittest.TestCase
        The unittest `TestCase` class that is performing the test.

    a: expression, symbol or number

    b: expression, symbol or number

    places: int
        Number of decimal places required for equality of floating
        point numbers in the expression. If None (the default), the
        expressions must be exactly equal.
    """
    form_a = canonical_form(a)
    form_b = canonical_form(b)
    try:
        if places is None:
            test.assertEqual(form_a, form_b)
        else:
            flat_a = _flatten(form_a, [])
            flat_b = _flatten(form_b, [])
            test.assertEqual(len(flat_a), len(flat_b))
            for x, y in zip(flat_a, flat_b):
                if type(x) is float and type(y) is float:
                    test.assertAlmostEqual(x, y, places=places)
                else:
                    test.assertEqual(x, y)
    except (AssertionError, test.failureException):
        test.fail(
            "Expressions not equal:\n\t%s\n\t!=\n\t%s"
            % (as_expression(a), as_expression(b))
        )
