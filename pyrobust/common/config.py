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

"""Hierarchical, validated configuration objects

A :class:`ConfigDict` maps option names to :class:`ConfigValue` entries
(or nested :class:`ConfigDict` objects).  Every value passes through the
entry's *domain*, a callable that validates the candidate and returns
it cast to the expected type, whenever it is set.  Options can be read
and written as attributes or items, and names containing spaces can be
spelled with underscores:

>>> from pyrobust.common.config import ConfigDict, ConfigValue, PositiveInt
>>> config = ConfigDict()
>>> _ = config.declare('max iter', ConfigValue(10, PositiveInt))
>>> config.max_iter = '20'
>>> config['max iter']
20

Calling a config returns an independent copy, optionally updated with
a dict of new values; this is how per-call solver options are applied.
"""

import enum
import inspect
import re
import sys
from collections.abc import Mapping

import ply.lex

from pyrobust.common.flags import NOTSET

_TRUE_STRINGS = {'TRUE', 'YES', 'T', 'Y', '1'}
_FALSE_STRINGS = {'FALSE', 'NO', 'F', 'N', '0'}


def Bool(val):
    """Domain validator for bool-like objects.

    Stricter than ``bool``: accepts ``True``, ``False``, the numbers 0
    and 1, and the case insensitive strings ``'true'``, ``'false'``,
    ``'yes'``, ``'no'``, ``'t'``, ``'f'``, ``'y'``, ``'n'``, ``'1'`` and
    ``'0'``.
    """
    if type(val) is bool:
        return val
    if isinstance(val, str):
        key = val.upper()
        if key in _TRUE_STRINGS:
            return True
        if key in _FALSE_STRINGS:
            return False
    elif val in (0, 1):
        return bool(val)
    raise ValueError("Expected Boolean, but received %s" % (val,))


def _integral(val, accept, expected):
    ans = int(val)
    if ans != float(val) or not accept(ans):
        raise ValueError("Expected %s, but received %s" % (expected, val))
    return ans


def _real(val, accept, expected):
    ans = float(val)
    if not accept(ans):
        raise ValueError("Expected %s, but received %s" % (expected, val))
    return ans


def PositiveInt(val):
    """Domain validator admitting integers > 0"""
    return _integral(val, lambda v: v > 0, "positive int")


def NonNegativeInt(val):
    """Domain validator admitting integers >= 0"""
    return _integral(val, lambda v: v >= 0, "non-negative int")


def PositiveFloat(val):
    """Domain validator admitting numbers > 0"""
    return _real(val, lambda v: v > 0, "positive float")


def NonNegativeFloat(val):
    """Domain validator admitting numbers >= 0"""
    return _real(val, lambda v: v >= 0, "non-negative float")


class In(object):
    """In(domain, cast=None)

    Domain validator admitting the members of a container, optionally
    after applying `cast` to the candidate.  ``In(SomeEnum)`` returns an
    :class:`InEnum`.
    """

    def __new__(cls, domain=None, cast=None):
        if (
            cls is In
            and cast is None
            and inspect.isclass(domain)
            and issubclass(domain, enum.Enum)
        ):
            return InEnum(domain)
        return super().__new__(cls)

    def __init__(self, domain, cast=None):
        self._domain = domain
        self._cast = cast

    def __call__(self, value):
        candidate = value if self._cast is None else self._cast(value)
        if candidate not in self._domain:
            raise ValueError("value %s not in domain %s" % (value, self._domain))
        return candidate

    def domain_name(self):
        return f'In({self._domain})'


class InEnum(object):
    """Domain validator casting to a member of an Enum

    Accepts members, values and member names; names are matched
    case-insensitively when there is no exact match.
    """

    def __init__(self, domain):
        self._domain = domain

    def __call__(self, value):
        try:
            return self._domain(value)
        except ValueError:
            pass
        if isinstance(value, str):
            members = self._domain.__members__
            if value in members:
                return members[value]
            by_lower_name = {name.lower(): m for name, m in members.items()}
            if value.lower() in by_lower_name:
                return by_lower_name[value.lower()]
        raise ValueError("%r is not a valid %s" % (value, self._domain.__name__))

    def domain_name(self):
        return f'InEnum[{self._domain.__name__}]'


class IsInstance(object):
    """Domain validator admitting instances of any of `bases`"""

    def __init__(self, *bases):
        if not bases:
            raise TypeError("IsInstance requires at least one type")
        self.baseClasses = bases

    def __call__(self, obj):
        if isinstance(obj, self.baseClasses):
            return obj
        names = ", ".join(repr(kls.__name__) for kls in self.baseClasses)
        raise ValueError(
            f"Expected an instance of one of these types: {names}, "
            f"but received value {obj!r} of type {type(obj).__name__!r}"
        )

    def domain_name(self):
        return "IsInstance[%s]" % (", ".join(k.__name__ for k in self.baseClasses),)


class ListOf(object):
    """Domain validator for lists of `itemtype`

    Each entry is validated by `domain` (default: `itemtype`).  A scalar
    becomes a one-entry list.  Strings are split into words on
    whitespace and commas (quotes group words) unless `string_lexer` is
    None; any other callable returning the words may be given instead.
    """

    def __init__(self, itemtype, domain=None, string_lexer=NOTSET):
        self.itemtype = itemtype
        self.domain = itemtype if domain is None else domain
        self.string_lexer = _words if string_lexer is NOTSET else string_lexer
        self.__name__ = 'ListOf(%s)' % (getattr(self.domain, '__name__', self.domain),)

    def __call__(self, value):
        if isinstance(value, str):
            if self.string_lexer is not None:
                return [self.domain(v) for v in self.string_lexer(value)]
        elif hasattr(value, '__iter__') and not isinstance(value, self.itemtype):
            return [self.domain(v) for v in value]
        return [self.domain(value)]

    def domain_name(self):
        return self.__name__


def _domain_name(domain):
    if domain is None:
        return ""
    name = getattr(domain, 'domain_name', None)
    if name is not None:
        return name() if callable(name) else name
    if inspect.isclass(domain):
        return domain.__name__
    return getattr(domain, '__name__', type(domain).__name__)


def _make_lexer(literals=''):
    """A ply lexer yielding quoted strings (quotes removed) and bare
    words; whitespace and commas separate tokens, and the characters of
    `literals` come back as single-character tokens"""
    tokens = ('STRING', 'WORD')
    t_ignore = ' \t\r,'

    @ply.lex.TOKEN(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"")
    def t_STRING(t):
        t.value = t.value[1:-1]
        return t

    @ply.lex.TOKEN(r'[^\s,%s]+' % (re.escape(literals),))
    def t_WORD(t):
        return t

    def t_error(t):
        raise ValueError(
            "Unexpected character %r at column %s" % (t.value[0], t.lexpos + 1)
        )

    return ply.lex.lex()


_lexers = {}


def _tokens(text, literals=''):
    lexer = _lexers.get(literals)
    if lexer is None:
        lexer = _lexers[literals] = _make_lexer(literals)
    lexer.input(text)
    return iter(lexer.token, None)


def _words(value):
    """Split a string into words (see :class:`ListOf`)"""
    return [tok.value for tok in _tokens(value)]


def _key_value_pairs(value):
    """Parse ``"key=val, key2: val2"`` into (key, value) pairs"""
    tokens = _tokens(value, ':=')
    for key in tokens:
        sep = next(tokens, None)
        if sep is None:
            raise ValueError("Expected ':' or '=' but encountered end of string")
        if sep.type not in ':=':
            raise ValueError(
                f"Expected ':' or '=' but found '{sep.value}' at "
                f"Column {sep.lexpos + 1}"
            )
        val = next(tokens, None)
        if val is None:
            raise ValueError(
                f"Expected value following '{sep.type}' but encountered end of string"
            )
        yield key.value, val.value


def _normalize(key):
    return str(key).replace(' ', '_')


class ConfigBase(object):
    __slots__ = (
        '_parent',
        '_name',
        '_userSet',
        '_data',
        '_default',
        '_domain',
        '_description',
        '_doc',
        '_visibility',
    )

    def __init__(
        self, default=None, domain=None, description=None, doc=None, visibility=0
    ):
        self._parent = None
        self._name = None
        self._userSet = False
        self._data = NOTSET
        self._default = default
        self._domain = domain
        self._description = description
        self._doc = doc
        self._visibility = visibility

    def __call__(self, value=NOTSET):
        """Return an independent copy, with `value` applied if given"""
        ans = self._copy()
        if value is not NOTSET:
            ans.set_value(value)
        return ans

    def name(self, fully_qualified=False):
        if self._name is None:
            return ""
        if not fully_qualified or self._parent is None:
            return self._name
        prefix = self._parent.name(True)
        return prefix + '.' + self._name if prefix else self._name

    def domain_name(self):
        return _domain_name(self._domain)

    def _cast(self, value):
        if value is None or self._domain is None:
            return value
        try:
            return self._domain(value)
        except Exception as err:
            raise ValueError(
                "invalid value for configuration '%s':\n"
                "\tFailed casting %s\n\tto %s\n\tError: %s"
                % (self.name(True), value, self.domain_name(), err)
            ) from err

    def user_values(self):
        """Yield every entry that was explicitly set"""
        if self._userSet:
            yield self

    def display(self, ostream=None, indent_spacing=2):
        """Write the values, YAML style, to `ostream` (default stdout)"""
        if ostream is None:
            ostream = sys.stdout
        for level, text in self._lines(0):
            ostream.write(' ' * indent_spacing * level + text + '\n')


class ConfigValue(ConfigBase):
    """A single validated configuration value.

    Parameters
    ----------
    default: optional
        Value taken when none has been set (passed through `domain`).
    domain: Callable, optional
        Validator called with every candidate value; returns the value
        to store (possibly converted) or raises.
    description: str, optional
        One-line description.
    doc: str, optional
        Long documentation.
    visibility: int, optional
    """

    __slots__ = ()

    def __init__(self, *args, **kwds):
        super().__init__(*args, **kwds)
        self.reset()

    def _copy(self):
        return type(self)(
            self.value(), self._domain, self._description, self._doc, self._visibility
        )

    def value(self):
        return self._data

    def set_value(self, value):
        self._data = self._cast(value)
        self._userSet = True

    def reset(self):
        self._data = self._cast(self._default)
        self._userSet = False

    def _lines(self, level):
        yield level, '%s: %r' % (self._name, self._data)


class ConfigDict(ConfigBase, Mapping):
    """A dictionary of configuration entries.

    Parameters
    ----------
    description: str, optional
    doc: str, optional
    implicit: bool, optional
        Accept keys that were not declared beforehand with
        :py:meth:`declare`.
    implicit_domain: Callable, optional
        Domain of the implicitly added entries.
    visibility: int, optional
    """

    __slots__ = ('_implicit_domain', '_declared', '_implicit_declaration')

    def __init__(
        self,
        description=None,
        doc=None,
        implicit=False,
        implicit_domain=None,
        visibility=0,
    ):
        self._declared = set()
        self._implicit_declaration = implicit
        self._implicit_domain = implicit_domain
        ConfigBase.__init__(self, None, None, description, doc, visibility)
        self._data = {}

    def _copy(self):
        # subclasses declare their entries in __init__; copy the entries
        # instead of re-running it
        ans = type(self).__new__(type(self))
        ConfigDict.__init__(
            ans,
            self._description,
            self._doc,
            self._implicit_declaration,
            self._implicit_domain,
            self._visibility,
        )
        for key, cfg in self._data.items():
            child = cfg()
            child._parent = ans
            child._name = cfg._name
            ans._data[key] = child
        ans._declared = set(self._declared)
        return ans

    def __getitem__(self, key):
        cfg = self._data[_normalize(key)]
        return cfg.value() if isinstance(cfg, ConfigValue) else cfg

    def get(self, key, default=NOTSET):
        """The entry object (not its value) stored under `key`"""
        cfg = self._data.get(_normalize(key))
        if cfg is None and default is not NOTSET:
            return ConfigValue(default, domain=self._implicit_domain)
        return cfg

    def __setitem__(self, key, val):
        cfg = self._data.get(_normalize(key))
        if cfg is None:
            self.add(key, val)
        elif cfg is not val:
            cfg.set_value(val)

    def __contains__(self, key):
        return _normalize(key) in self._data

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return (cfg._name for cfg in self._data.values())

    def __getattr__(self, attr):
        # only reached when regular attribute lookup fails
        key = _normalize(attr)
        if attr == '_data' or key not in self._data:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute '{attr}'"
            )
        return self[key]

    def __setattr__(self, name, value):
        if name in ConfigDict._all_slots:
            super().__setattr__(name, value)
        else:
            self[name] = value

    def keys(self):
        return iter(self)

    def values(self):
        return (self[key] for key in self._data)

    def items(self):
        return ((cfg._name, self[key]) for key, cfg in self._data.items())

    def _add(self, name, config):
        key = _normalize(name)
        if config._parent is not None:
            raise ValueError(
                "config '%s' is already assigned to ConfigDict '%s'; "
                "cannot reassign to '%s'"
                % (name, config._parent.name(True), self.name(True))
            )
        if key in self._data:
            raise ValueError(
                "duplicate config '%s' defined for ConfigDict '%s'"
                % (name, self.name(True))
            )
        config._parent = self
        config._name = str(name)
        self._data[key] = config
        return config

    def declare(self, name, config):
        """Add the entry `config` under `name` and return it"""
        self._declared.add(_normalize(name))
        return self._add(name, config)

    def add(self, name, config):
        """Add an implicit (undeclared) entry"""
        if not self._implicit_declaration:
            raise ValueError(
                "Key '%s' not defined in ConfigDict '%s'"
                " and Dict disallows implicit entries" % (name, self.name(True))
            )
        if not isinstance(config, ConfigBase):
            config = ConfigValue(config, domain=self._implicit_domain)
        ans = self._add(name, config)
        ans._userSet = True
        return ans

    def value(self):
        return {cfg._name: cfg.value() for cfg in self._data.values()}

    def set_value(self, value):
        """Update several entries from a dict (or a ``"k=v, k2: v2"``
        string).  Either every entry is updated or none is."""
        if value is None:
            return self
        if isinstance(value, str):
            value = dict(_key_value_pairs(value))
        if not isinstance(value, (dict, ConfigDict)):
            raise ValueError(
                "Expected dict value for %s.set_value, found %s"
                % (self.name(True), type(value).__name__)
            )
        declared, implicit = [], []
        for key in value:
            if _normalize(key) in self._data:
                declared.append(key)
            elif self._implicit_declaration:
                implicit.append(key)
            else:
                raise ValueError(
                    "key '%s' not defined for ConfigDict '%s' and "
                    "implicit (undefined) keys are not allowed"
                    % (key, self.name(True))
                )
        snapshot = self.value()
        try:
            for key in declared:
                self[key] = value[key]
            for key in sorted(implicit):
                self.add(key, value[key])
        except Exception:
            self.reset()
            self.set_value(snapshot)
            raise
        self._userSet = True
        return self

    def reset(self):
        """Restore declared entries to their defaults and drop implicit
        ones"""
        for key in list(self._data):
            if key in self._declared:
                self._data[key].reset()
            else:
                del self._data[key]
        self._userSet = False

    def user_values(self):
        yield from super().user_values()
        for cfg in self._data.values():
            yield from cfg.user_values()

    def _lines(self, level):
        for cfg in self._data.values():
            if isinstance(cfg, ConfigDict):
                yield level, cfg._name + ':'
                yield from cfg._lines(level + 1)
            else:
                yield from cfg._lines(level)


ConfigDict._all_slots = set(ConfigBase.__slots__) | set(ConfigDict.__slots__)
