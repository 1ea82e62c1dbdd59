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
#
#  The standard unittest module, extended with the assertions used by
#  the pyrobust test suite.
#

import math
import re

from unittest import *
import unittest as _unittest
from collections.abc import Mapping, Sequence

from unittest import mock

import pytest


def _as_float(val):
    """Numbers as float; symbols (which refuse float()) by their value"""
    try:
        return float(val)
    except TypeError:
        return float(val.value)


def _compare(first, second, abstol, reltol, path):
    """Return None if first ~= second, else a description of the
    first mismatch found"""
    if isinstance(first, Mapping) and isinstance(second, Mapping):
        if set(first) != set(second):
            return "%s: keys differ (%s != %s)" % (
                path,
                sorted(map(repr, first)),
                sorted(map(repr, second)),
            )
        for key in first:
            err = _compare(
                first[key], second[key], abstol, reltol, "%s[%r]" % (path, key)
            )
            if err:
                return err
        return None
    if isinstance(first, str) or isinstance(second, str):
        if first == second:
            return None
        return "%s: %r != %r" % (path, first, second)
    if hasattr(first, 'tolist') and getattr(first, 'ndim', 0):
        first = first.tolist()
    if hasattr(second, 'tolist') and getattr(second, 'ndim', 0):
        second = second.tolist()
    if isinstance(first, Sequence) and isinstance(second, Sequence):
        if len(first) != len(second):
            return "%s: lengths differ (%s != %s)" % (path, len(first), len(second))
        for i, (f, s) in enumerate(zip(first, second)):
            err = _compare(f, s, abstol, reltol, "%s[%d]" % (path, i))
            if err:
                return err
        return None
    if first is second or (first is None and second is None):
        return None
    try:
        f, s = _as_float(first), _as_float(second)
    except (TypeError, ValueError, AttributeError):
        return "%s: %r != %r" % (path, first, second)
    if f == s or (math.isnan(f) and math.isnan(s)):
        return None
    diff = abs(f - s)
    if abstol is not None and diff <= abstol:
        return None
    if reltol is not None and diff <= reltol * max(abs(f), abs(s)):
        return None
    return "%s: %r !~= %r" % (path, first, second)


class _AssertRaisesContext_NormalizeWhitespace(_unittest.case._AssertRaisesContext):
    def __exit__(self, exc_type, exc_value, tb):
        pattern, self.expected_regex = self.expected_regex, None
        try:
            if not super().__exit__(exc_type, exc_value, tb):
                return False
        finally:
            self.expected_regex = pattern
        text = re.sub(r'(?s)\s+', ' ', str(exc_value))
        if not pattern.search(text):
            self._raiseFailure('"%s" does not match "%s"' % (pattern.pattern, text))
        return True


class TestCase(_unittest.TestCase):
    """unittest.TestCase with the pyrobust assertions

    * :py:meth:`assertStructuredAlmostEqual` compares nested lists,
      tuples, dicts and numpy arrays of numbers up to a tolerance
    * :py:meth:`assertExpressionsEqual` compares expressions
      structurally
    * :py:meth:`assertRaisesRegex` accepts ``normalize_whitespace=True``
    """

    maxDiff = None

    def assertStructuredAlmostEqual(
        self, first, second, places=None, msg=None, reltol=None, abstol=None
    ):
        """Assert that `first` and `second` have the same structure and
        numerically close entries.

        `places` sets ``abstol = 10**-places``.  Without any tolerance,
        `reltol` defaults to 1e-7.
        """
        if places is not None:
            if abstol is not None:
                raise ValueError("Cannot specify both places and abstol")
            abstol = 10 ** (-places)
        if abstol is None and reltol is None:
            reltol = 1e-7
        err = _compare(first, second, abstol, reltol, 'first')
        if err:
            self.fail(
                self._formatMessage(
                    msg,
                    "%s\n    (compared with abs=%s, rel=%s)" % (err, abstol, reltol),
                )
            )

    def assertRaisesRegex(self, expected_exception, expected_regex, *args, **kwargs):
        """:py:meth:`unittest.TestCase.assertRaisesRegex`, optionally
        (``normalize_whitespace=True``) matching against the message
        with every run of whitespace collapsed to one space"""
        if kwargs.pop('normalize_whitespace', False):
            context_class = _AssertRaisesContext_NormalizeWhitespace
        else:
            context_class = _unittest.case._AssertRaisesContext
        context = context_class(expected_exception, self, expected_regex)
        return context.handle('assertRaisesRegex', args, kwargs)

    def assertExpressionsEqual(self, a, b, places=None):
        """Assert that two expressions normalize to the same terms and
        constant (see :func:`pyrobust.core.expr.compare.canonical_form`)"""
        from pyrobust.core.expr.compare import assertExpressionsEqual

        return assertExpressionsEqual(self, a, b, places)
