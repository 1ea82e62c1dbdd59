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

"""String rendering of linear expressions and constraints.

Rendering rules:

- integral numbers are printed without a decimal point
- terms whose coefficient magnitude is below ``ZERO_TOLERANCE`` are
  dropped
- a term with a coefficient of magnitude one is printed without the
  numeral
- the sign of each term is folded into the join (``x - 2 y``)
- a constant is printed only if its magnitude is at least
  ``CONSTANT_TOLERANCE``
"""

from pyrobust.common.numeric_types import string_intclamp

ZERO_TOLERANCE = 1e-20
CONSTANT_TOLERANCE = 1e-6


def _join(pieces):
    # pieces: list of (is_negative, text)
    if not pieces:
        return "0"
    neg, text = pieces[0]
    ans = ('-' + text) if neg else text
    for neg, text in pieces[1:]:
        ans += (' - ' if neg else ' + ') + text
    return ans


def _numeric_term(name, coef):
    if abs(abs(coef) - 1) <= ZERO_TOLERANCE:
        return (coef < 0, name)
    return (coef < 0, "%s %s" % (string_intclamp(abs(coef)), name))


def linear_to_string(terms, constant, show_constant=True):
    """Render ``sum(coef * name) + constant``

    Parameters
    ----------
    terms: list of (str, float)
        (name, coefficient) pairs, with duplicate names already collapsed

    constant: float

    show_constant: bool
        If False, the constant is omitted

    """
    pieces = [_numeric_term(n, c) for n, c in terms if abs(c) >= ZERO_TOLERANCE]
    if not pieces:
        if show_constant:
            return string_intclamp(constant)
        return "0"
    if show_constant and abs(constant) >= CONSTANT_TOLERANCE:
        pieces.append((constant < 0, string_intclamp(abs(constant))))
    return _join(pieces)


def full_to_string(terms, constant, show_constant=True):
    """Render ``sum(coef_expr * name) + constant_expr``

    Each coefficient is a (normalized) uncertain-linear expression; a
    coefficient that is a plain number is printed as a number, a
    coefficient that is exactly ``+/-param`` is printed without
    parentheses, and anything else is parenthesized.

    """
    pieces = []
    for name, coef in terms:
        uterms = coef.terms
        if not uterms:
            if abs(coef.constant) <= ZERO_TOLERANCE:
                continue
            pieces.append(_numeric_term(name, coef.constant))
        elif (
            len(uterms) == 1
            and abs(coef.constant) <= ZERO_TOLERANCE
            and abs(abs(uterms[0][1]) - 1) <= ZERO_TOLERANCE
        ):
            pieces.append((uterms[0][1] < 0, "%s %s" % (uterms[0][0].name, name)))
        else:
            pieces.append((False, "(%s) %s" % (coef.to_string(), name)))
    if not pieces:
        return constant.to_string() if show_constant else "0"
    if show_constant:
        cstr = constant.to_string()
        if cstr != "0":
            if cstr.startswith('-'):
                pieces.append((True, cstr[1:]))
            else:
                pieces.append((False, cstr))
    return _join(pieces)


def relational_to_string(body, lower, upper):
    """Render a (possibly ranged) constraint ``lower <= body <= upper``"""
    has_lb = lower is not None and lower > float('-inf')
    has_ub = upper is not None and upper < float('inf')
    if has_lb and has_ub:
        if lower == upper:
            return "%s == %s" % (body, string_intclamp(upper))
        return "%s <= %s <= %s" % (
            string_intclamp(lower),
            body,
            string_intclamp(upper),
        )
    elif has_ub:
        return "%s <= %s" % (body, string_intclamp(upper))
    elif has_lb:
        return "%s >= %s" % (body, string_intclamp(lower))
    return "-inf <= %s <= inf" % (body,)
