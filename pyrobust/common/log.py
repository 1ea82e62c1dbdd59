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
#  Logging support.
#
#  Every pyrobust module logs through a child of the 'pyrobust' logger.
#  That logger carries one handler writing to the current sys.stdout,
#  which stays quiet as soon as the root logger has handlers of its own.
#

import io
import logging
import sys

DEFAULT_LOGGER_NAME = "pyrobust"


def is_debug_set(logger):
    """True if DEBUG output was explicitly requested for `logger`

    Unlike ``logger.isEnabledFor(logging.DEBUG)`` this is False when
    the effective level is NOTSET.
    """
    return logging.NOTSET < logger.getEffectiveLevel() <= logging.DEBUG


class Preformatted(object):
    """A log message to be emitted exactly as given"""

    __slots__ = ('msg',)

    def __init__(self, msg):
        self.msg = msg

    def __str__(self):
        return str(self.msg)

    def __repr__(self):
        return f'Preformatted({self.msg!r})'


class RobustFormatter(logging.Formatter):
    """``LEVEL: message``, except for :class:`Preformatted` messages"""

    def __init__(self, fmt='%(levelname)s: %(message)s', **kwds):
        super().__init__(fmt=fmt, **kwds)

    def format(self, record):
        if isinstance(record.msg, Preformatted):
            return str(record.msg)
        return super().format(record)


class StdoutHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stdout`` is at the time a
    record is emitted"""

    def __init__(self):
        super().__init__()
        self.stream = None

    def _on_stdout(self, method, *args):
        self.stream = sys.stdout
        try:
            return method(self, *args)
        finally:
            self.stream = None

    def flush(self):
        self._on_stdout(logging.StreamHandler.flush)

    def emit(self, record):
        self._on_stdout(logging.StreamHandler.emit, record)


class _NoRootHandlers(object):
    def filter(self, record):
        return not logging.getLogger().handlers


class PreformattedLogger(logging.Logger):
    """Logger whose messages are interpolated eagerly and wrapped in
    :class:`Preformatted`, so that banners and iteration tables are not
    prefixed by :class:`RobustFormatter`."""

    def _log(self, level, msg, args, **kwargs):
        if args:
            msg = msg % args
        return super()._log(level, Preformatted(msg), (), **kwargs)


def setup_logger(name=DEFAULT_LOGGER_NAME + ".robust"):
    """Return the INFO-level :class:`PreformattedLogger` `name`"""
    previous = logging.getLoggerClass()
    logging.setLoggerClass(PreformattedLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)
    logger.setLevel(logging.INFO)
    return logger


class LoggingIntercept(object):
    r"""Capture the records a logger emits at or above `level`

    While active, the target logger writes only to `output` (a new
    :class:`io.StringIO` if omitted, returned by ``__enter__``): its
    handlers are detached and propagation is switched off.  Everything
    is restored on exit.

    Parameters
    ----------
    output: io.TextIOBase, optional
    module: str, optional
        Name of the logger to intercept (exclusive with `logger`)
    level: int
        Level of the capturing handler (default ``logging.WARNING``)
    formatter: logging.Formatter, optional
        Defaults to ``'%(message)s'``
    logger: logging.Logger, optional

    Examples
    --------
    >>> import io, logging
    >>> from pyrobust.common.log import LoggingIntercept
    >>> buf = io.StringIO()
    >>> with LoggingIntercept(buf, 'pyrobust.core', logging.WARNING):
    ...     logging.getLogger('pyrobust.core').warning('a simple message')
    >>> buf.getvalue()
    'a simple message\n'
    """

    def __init__(
        self,
        output=None,
        module=None,
        level=logging.WARNING,
        formatter=None,
        logger=None,
    ):
        if logger is not None and module is not None:
            raise ValueError(
                "LoggingIntercept: only one of 'module' and 'logger' is allowed"
            )
        self._logger = logger if logger is not None else logging.getLogger(module)
        self.output = output
        self._level = level
        self._formatter = formatter or logging.Formatter('%(message)s')
        self.handler = None
        self._saved = None

    @property
    def module(self):
        return self._logger.name

    def __enter__(self):
        logger = self._logger
        if self.handler is not None:
            raise RuntimeError("LoggingIntercept is not reentrant")
        output = io.StringIO() if self.output is None else self.output
        level = logger.getEffectiveLevel() if self._level is None else self._level
        self.handler = logging.StreamHandler(output)
        self.handler.setFormatter(self._formatter)
        self.handler.setLevel(level)
        self._saved = (logger.level, logger.propagate, logger.handlers)
        logger.handlers = [self.handler]
        logger.propagate = False
        logger.setLevel(level)
        return output

    def __exit__(self, et, ev, tb):
        logger = self._logger
        level, logger.propagate, logger.handlers = self._saved
        logger.setLevel(level)
        self.handler = None


_pyrobust_handler = StdoutHandler()
_pyrobust_handler.setFormatter(RobustFormatter())
_pyrobust_handler.addFilter(_NoRootHandlers())
logging.getLogger(DEFAULT_LOGGER_NAME).addHandler(_pyrobust_handler)
