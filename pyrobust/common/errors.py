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

import textwrap


def _wrap(text, width, first, rest):
    if '\n' in text:
        return text
    return textwrap.fill(
        text,
        width=width,
        initial_indent=first,
        subsequent_indent=rest,
        break_long_words=False,
        break_on_hyphens=False,
    )


def format_exception(msg, prolog=None, epilog=None, exception=None, width=76):
    """Line-wrap an exception message for display on the console

    The first line is wrapped as if it followed the ``module.Class: ``
    prefix Python prints for `exception` (an instance or a class).
    When an `epilog` is given the message body is indented one level
    deeper than the `prolog` and `epilog`.
    """
    if exception is None:
        lead = len('NotImplementedError: ')
    else:
        cls = exception if isinstance(exception, type) else type(exception)
        lead = len(cls.__name__) + 2
        if cls.__module__ != 'builtins':
            lead += len(cls.__module__) + 1
    body_indent = ' ' * (8 if epilog else 4)

    parts = []
    first = ' ' * lead
    if prolog is not None:
        prolog = _wrap(prolog, width, first, ' ' * 4).lstrip()
        if '\n' in prolog:
            body_indent = ' ' * 8
        parts.append(prolog)
        first = body_indent
    body = _wrap(msg, width, first, body_indent)
    parts.append(body if parts else body.lstrip())
    if epilog is not None:
        parts.append(_wrap(epilog, width, ' ' * 4, ' ' * 4))
    return '\n'.join(parts)


class PyrobustException(Exception):
    """Base class of the exceptions raised by pyrobust.

    A subclass may set `default_message`, used when it is raised
    without arguments.
    """

    default_message = None

    def __init__(self, *args):
        if not args and self.default_message:
            args = (self.default_message,)
        super().__init__(*args)


class _CarriesResults(PyrobustException):
    # `results` is the RobustSolveResults of the failed solve
    def __init__(self, *args, results=None):
        super().__init__(*args)
        self.results = results


class DeveloperError(PyrobustException, NotImplementedError):
    """An internal inconsistency in pyrobust itself (not a modeling
    error on the user's side)."""

    def __str__(self):
        return format_exception(
            repr(super().__str__()),
            prolog="Internal pyrobust implementation error:",
            epilog="Please report this to the pyrobust developers.",
            exception=self,
        )


class OwnershipMismatchError(PyrobustException, ValueError):
    """Raised when an expression or constraint combines symbols
    (variables or uncertain parameters) that belong to different models.
    """

    default_message = "Expression mixes symbols owned by different models."


class TypeMismatchError(PyrobustException, TypeError):
    """Raised when a symbol of the wrong kind is supplied, e.g., an
    adaptive policy declared to depend on something other than an
    uncertain parameter, or an unrecognized policy kind.
    """


class SetupError(PyrobustException, RuntimeError):
    """Raised by an oracle that cannot represent the uncertainty set
    it was given."""


class SeparationError(PyrobustException, RuntimeError):
    """Raised when the sub-problem searching for the worst-case
    uncertainty realization cannot be solved (e.g., it is unbounded)."""


class SeparationTimeLimitError(SeparationError):
    """Raised when a separation sub-solve stops at the wall time limit
    of the robust solve."""


class IterationLimitError(_CarriesResults, RuntimeError):
    """Raised when the cutting-plane loop reaches its iteration limit
    and the caller asked for exceptions on non-optimal results.

    The :class:`RobustSolveResults` holding the best candidate found is
    available as the `results` attribute.
    """


class SolverError(_CarriesResults, RuntimeError):
    """Raised when the underlying deterministic solver fails, or
    reports infeasibility or unboundedness and the caller asked for
    exceptions on non-optimal results.
    """


class NonlinearExpressionError(PyrobustException, TypeError):
    """Raised when an operation would produce an expression that is not
    affine in the variables (or not affine in the uncertain parameters)."""
