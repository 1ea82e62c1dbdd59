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

"""Linear expressions over variables and uncertain parameters.

Three expression types are supported:

- :class:`LinearExpr`: ``sum(c_i * x_i) + c0`` over variables
- :class:`UncAffExpr`: ``sum(c_k * u_k) + c0`` over uncertain parameters
- :class:`FullAffExpr`: ``sum(a_i(u) * x_i) + a0(u)`` over variables,
  where every coefficient ``a_i(u)`` is an :class:`UncAffExpr`

Arithmetic concatenates terms; duplicate symbols are only collapsed by
:meth:`normalized`, which is applied before display, comparison and
reformulation.  Combining a :class:`LinearExpr` with an
:class:`UncAffExpr` yields a :class:`FullAffExpr`.  Products that are
not linear (variable times variable, parameter times parameter, or
parameter times a :class:`FullAffExpr`) raise
:class:`~pyrobust.common.errors.NonlinearExpressionError`.

Note that (as for constraints) ``==``, ``<=`` and ``>=`` build
constraint objects; use :func:`expressions_equal` or
:meth:`ExpressionBase.is_equal` for structural equality.
"""

import math

from collections.abc import Mapping

from pyrobust.common.errors import (
    NonlinearExpressionError,
    OwnershipMismatchError,
    PyrobustException,
)
from pyrobust.common.numeric_types import is_numeric, native_numeric_types
from pyrobust.core.expr import printer
from pyrobust.core.expr.relational_expr import build_constraint


def _check_model(a, b):
    """Return the model owning symbols of both `a` and `b`"""
    if a is None:
        return b
    if b is None or a is b:
        return a
    raise OwnershipMismatchError(
        "Cannot combine symbols owned by different models ('%s' and '%s')"
        % (getattr(a, 'name', a), getattr(b, 'name', b))
    )


def _convert(obj):
    """Convert an operand to a float or an expression (None if the
    operand is not supported)"""
    if obj.__class__ in native_numeric_types:
        return float(obj)
    if isinstance(obj, NumericOperatorMixin):
        return obj._to_expr()
    if is_numeric(obj):
        return float(obj)
    return None


def _reduce(e):
    """Reduce an expression to its simplest kind: a term-free expression
    becomes its constant, and a FullAffExpr whose coefficients are all
    numbers becomes a LinearExpr"""
    if e.__class__ is float:
        return e
    e = e.normalized()
    if e.kind == 'full':
        if not e.terms:
            return _reduce(e.constant)
        if all(c.is_constant() for _, c in e.terms) and e.constant.is_constant():
            return _reduce(
                LinearExpr._new(
                    [(v, c.constant) for v, c in e.terms], e.constant.constant, e._model
                )
            )
        return e
    if e.terms:
        return e
    return e.constant


def _to_full(e):
    if e.kind == 'full':
        return e
    if e.kind == 'uncertain':
        return FullAffExpr._new([], e, e._model)
    return FullAffExpr._new(
        [(v, UncAffExpr._new([], c, None)) for v, c in e.terms],
        UncAffExpr._new([], e.constant, None, e._parts),
        e._model,
    )


def _add(a, b):
    if a.__class__ is float:
        if b.__class__ is float:
            return a + b
        return b._add_constant(a)
    if b.__class__ is float:
        return a._add_constant(b)
    model = _check_model(a._model, b._model)
    if a.kind != b.kind:
        a = _to_full(a)
        b = _to_full(b)
    return a._concat(b, model)


def _mul(a, b):
    if a.__class__ is float:
        if b.__class__ is float:
            return a * b
        return b._scale(a)
    if b.__class__ is float:
        return a._scale(b)
    ra = _reduce(a)
    if ra.__class__ is float:
        return b._scale(ra)
    rb = _reduce(b)
    if rb.__class__ is float:
        return a._scale(rb)
    model = _check_model(a._model, b._model)
    kinds = (ra.kind, rb.kind)
    if kinds == ('uncertain', 'linear'):
        u, lin = ra, rb
    elif kinds == ('linear', 'uncertain'):
        u, lin = rb, ra
    else:
        raise NonlinearExpressionError(
            "Cannot multiply '%s' by '%s': the product is not linear" % (a, b)
        )
    return FullAffExpr._new(
        [(v, u._scale(c)) for v, c in lin.terms], u._scale(lin.constant), model
    )


def _div(a, b):
    rb = _reduce(b)
    if rb.__class__ is not float:
        raise NonlinearExpressionError(
            "Cannot divide '%s' by the non-constant expression '%s'" % (a, b)
        )
    if rb == 0:
        raise ZeroDivisionError("Division of '%s' by zero" % (a,))
    if a.__class__ is float:
        return a / rb
    return a._scale(1.0 / rb)


class NumericOperatorMixin(object):
    """Arithmetic and relational operators shared by symbols
    (variables and uncertain parameters) and expressions.

    Derived classes implement :meth:`_to_expr`, which returns the
    expression equivalent to the object.
    """

    __slots__ = ()

    # Ensure numpy scalars defer to our reflected operators
    __array_priority__ = 100

    __hash__ = object.__hash__

    def _to_expr(self):
        raise NotImplementedError(
            "Derived numeric class '%s' failed to implement _to_expr()"
            % (type(self).__name__,)
        )

    def __bool__(self):
        raise PyrobustException(
            "Cannot convert non-constant expression '%s' to bool." % (self,)
        )

    def __add__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _add(self._to_expr(), other)

    def __radd__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _add(other, self._to_expr())

    def __sub__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _add(self._to_expr(), _mul(other, -1.0))

    def __rsub__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _add(other, self._to_expr()._scale(-1.0))

    def __mul__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _mul(self._to_expr(), other)

    def __rmul__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _mul(other, self._to_expr())

    def __truediv__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _div(self._to_expr(), other)

    def __rtruediv__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return _div(other, self._to_expr())

    def __neg__(self):
        return self._to_expr()._scale(-1.0)

    def __pos__(self):
        return self._to_expr()

    def __le__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return build_constraint(_add(self._to_expr(), _mul(other, -1.0)), upper=0)

    def __ge__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return build_constraint(_add(self._to_expr(), _mul(other, -1.0)), lower=0)

    def __eq__(self, other):
        other = _convert(other)
        if other is None:
            return NotImplemented
        return build_constraint(
            _add(self._to_expr(), _mul(other, -1.0)), lower=0, upper=0
        )


def _collapse(terms):
    """Sum the coefficients of duplicate symbols (exactly, in order of
    first appearance) and drop terms whose sum is zero"""
    order = []
    groups = {}
    for sym, coef in terms:
        idx = sym.index
        if idx in groups:
            groups[idx][1].append(coef)
        else:
            groups[idx] = (sym, [coef])
            order.append(idx)
    ans = []
    for idx in order:
        sym, coefs = groups[idx]
        coef = coefs[0] if len(coefs) == 1 else math.fsum(coefs)
        if coef != 0:
            ans.append((sym, coef))
    return ans


def _lookup(values, sym):
    if values is None:
        return sym.value
    if isinstance(values, Mapping):
        return values[sym]
    return values[sym.index]


class ExpressionBase(NumericOperatorMixin):
    """Base class for the linear expression types"""

    # _parts: the numbers whose exact sum is a numeric `constant` (None
    # when `constant` is the only one)
    __slots__ = ('terms', 'constant', '_model', '_parts')

    #: One of 'linear', 'uncertain', 'full'
    kind = None

    @classmethod
    def _new(cls, terms, constant, model, parts=None):
        ans = cls.__new__(cls)
        ans.terms = terms
        ans.constant = constant
        ans._model = model
        ans._parts = parts
        return ans

    def _constant_parts(self):
        return (self.constant,) if self._parts is None else self._parts

    def _exact_constant(self):
        if self._parts is None:
            return self.constant
        return math.fsum(self._parts)

    def _to_expr(self):
        return self

    @property
    def model(self):
        """The model that owns the symbols in this expression (None
        for expressions without symbols)"""
        return self._model

    def _concat(self, other, model):
        return self._new(
            self.terms + other.terms,
            self.constant + other.constant,
            model,
            self._constant_parts() + other._constant_parts(),
        )

    def _add_constant(self, c):
        if c == 0:
            return self._new(list(self.terms), self.constant, self._model, self._parts)
        return self._new(
            list(self.terms),
            self.constant + c,
            self._model,
            self._constant_parts() + (c,),
        )

    def _scale(self, c):
        parts = self._parts
        if parts is not None:
            parts = tuple(p * c for p in parts)
        return self._new(
            [(s, coef * c) for s, coef in self.terms],
            self.constant * c,
            self._model,
            parts,
        )

    def normalized(self):
        """Return an equivalent expression with duplicate symbols
        collapsed and zero terms removed"""
        raise NotImplementedError

    def split_constant(self):
        """Return ``(body, const)``, where ``body`` is this expression
        without its numeric constant"""
        raise NotImplementedError

    def is_constant(self):
        return not self.normalized().terms

    def is_equal(self, other):
        """Structural equality (after normalization)"""
        return expressions_equal(self, other)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return self.to_string()


class UncAffExpr(ExpressionBase):
    """An affine expression in the uncertain parameters

    ``UncAffExpr(constant=0, terms=None)``, where `terms` is a list of
    (UncertainParam, float) pairs.
    """

    __slots__ = ()

    kind = 'uncertain'

    def __init__(self, constant=0.0, terms=None):
        self.terms = [(u, float(c)) for u, c in terms] if terms else []
        self.constant = float(constant)
        self._model = None
        self._parts = None
        for u, _ in self.terms:
            self._model = _check_model(self._model, u.model)

    @classmethod
    def from_param(cls, param):
        return cls._new([(param, 1.0)], 0.0, param.model)

    @classmethod
    def from_constants(cls, values):
        """Return a list with one constant expression per value"""
        return [cls(v) for v in values]

    def normalized(self):
        return self._new(_collapse(self.terms), self._exact_constant(), self._model)

    def split_constant(self):
        return self._new(list(self.terms), 0.0, self._model), self._exact_constant()

    def parameters(self):
        return [u for u, _ in self.normalized().terms]

    def evaluate(self, params):
        """Evaluate the expression at a realization of the parameters

        `params` is a mapping from UncertainParam to value, or a
        sequence indexed by the parameter index.
        """
        ans = [c * _lookup(params, u) for u, c in self.terms]
        return math.fsum(ans + list(self._constant_parts()))

    def to_string(self, show_constant=True):
        e = self.normalized()
        return printer.linear_to_string(
            [(u.name, c) for u, c in e.terms], e.constant, show_constant
        )


class LinearExpr(ExpressionBase):
    """An affine expression in the variables

    ``LinearExpr(constant=0, terms=None)``, where `terms` is a list of
    (Variable, float) pairs.
    """

    __slots__ = ()

    kind = 'linear'

    def __init__(self, constant=0.0, terms=None):
        self.terms = [(v, float(c)) for v, c in terms] if terms else []
        self.constant = float(constant)
        self._model = None
        self._parts = None
        for v, _ in self.terms:
            self._model = _check_model(self._model, v.model)

    @classmethod
    def from_var(cls, var):
        return cls._new([(var, 1.0)], 0.0, var.model)

    def normalized(self):
        return self._new(_collapse(self.terms), self._exact_constant(), self._model)

    def split_constant(self):
        return self._new(list(self.terms), 0.0, self._model), self._exact_constant()

    def variables(self):
        return [v for v, _ in self.normalized().terms]

    def evaluate(self, values=None):
        """Evaluate the expression

        `values` is a mapping from Variable to value, a sequence
        indexed by the variable index, or None to use the current
        variable values.
        """
        ans = [c * _lookup(values, v) for v, c in self.terms]
        return math.fsum(ans + list(self._constant_parts()))

    def to_string(self, show_constant=True):
        e = self.normalized()
        return printer.linear_to_string(
            [(v.name, c) for v, c in e.terms], e.constant, show_constant
        )


class FullAffExpr(ExpressionBase):
    """An affine expression in the variables whose coefficients (and
    constant) are affine expressions in the uncertain parameters

    ``FullAffExpr(terms=None, constant=None)``, where `terms` is a list
    of (Variable, UncAffExpr) pairs and `constant` is an UncAffExpr (or
    a number).
    """

    __slots__ = ()

    kind = 'full'

    def __init__(self, terms=None, constant=None):
        self.terms = []
        for v, c in terms or ():
            if is_numeric(c):
                c = UncAffExpr(c)
            self.terms.append((v, c))
        if constant is None:
            constant = UncAffExpr()
        elif is_numeric(constant):
            constant = UncAffExpr(constant)
        self.constant = constant
        self._parts = None
        model = constant.model
        for v, c in self.terms:
            model = _check_model(_check_model(model, v.model), c.model)
        self._model = model

    def _concat(self, other, model):
        const_model = _check_model(self.constant._model, other.constant._model)
        return self._new(
            self.terms + other.terms,
            self.constant._concat(other.constant, const_model),
            model,
        )

    def _add_constant(self, c):
        return self._new(list(self.terms), self.constant._add_constant(c), self._model)

    def _scale(self, c):
        return self._new(
            [(v, coef._scale(c)) for v, coef in self.terms],
            self.constant._scale(c),
            self._model,
        )

    def normalized(self):
        order = []
        groups = {}
        for v, coef in self.terms:
            if v.index in groups:
                groups[v.index][1].append(coef)
            else:
                groups[v.index] = (v, [coef])
                order.append(v.index)
        terms = []
        for idx in order:
            v, coefs = groups[idx]
            parts = tuple(p for c in coefs for p in c._constant_parts())
            coef = UncAffExpr._new(
                [t for c in coefs for t in c.terms], None, self._model, parts
            ).normalized()
            if coef.terms or coef.constant != 0:
                terms.append((v, coef))
        return self._new(terms, self.constant.normalized(), self._model)

    def split_constant(self):
        body = self._new(
            list(self.terms),
            UncAffExpr._new(list(self.constant.terms), 0.0, self.constant._model),
            self._model,
        )
        return body, self.constant._exact_constant()

    def variables(self):
        return [v for v, _ in self.normalized().terms]

    def parameters(self):
        e = self.normalized()
        ans = []
        seen = set()
        for coef in [c for _, c in e.terms] + [e.constant]:
            for u, _ in coef.terms:
                if u.index not in seen:
                    seen.add(u.index)
                    ans.append(u)
        return ans

    def specialize(self, params):
        """Return the :class:`LinearExpr` obtained by fixing the
        uncertain parameters to a realization"""
        return LinearExpr._new(
            [(v, coef.evaluate(params)) for v, coef in self.terms],
            self.constant.evaluate(params),
            self._model,
        )

    def evaluate(self, params, values=None):
        return self.specialize(params).evaluate(values)

    def to_string(self, show_constant=True):
        e = self.normalized()
        return printer.full_to_string(
            [(v.name, c) for v, c in e.terms], e.constant, show_constant
        )


def as_expression(obj):
    """Convert a number, symbol or expression to a float or expression"""
    ans = _convert(obj)
    if ans is None:
        raise TypeError(
            "Cannot convert object of type '%s' to an expression"
            % (type(obj).__name__,)
        )
    return ans


def expressions_equal(a, b):
    """Return True if `a` and `b` are structurally equal after
    normalization.  Numbers compare equal to term-free expressions with
    the same constant."""
    a = _reduce(as_expression(a))
    b = _reduce(as_expression(b))
    if a.__class__ is float or b.__class__ is float:
        return a.__class__ is b.__class__ and a == b
    if a.kind != b.kind or len(a.terms) != len(b.terms):
        return False
    if a.kind == 'full':
        if not expressions_equal(a.constant, b.constant):
            return False
        return all(
            va is vb and expressions_equal(ca, cb)
            for (va, ca), (vb, cb) in zip(a.terms, b.terms)
        )
    return a.constant == b.constant and all(
        sa is sb and ca == cb for (sa, ca), (sb, cb) in zip(a.terms, b.terms)
    )
