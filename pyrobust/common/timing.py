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

"""Wall-clock timers

.. autosummary::

   TicTocTimer
   HierarchicalTimer
"""

import logging
import sys

from timeit import default_timer

_NotSpecified = object()


class TicTocTimer(object):
    """Report elapsed wall-clock time.

    The timer works in two modes.  :meth:`tic` / :meth:`toc` report the
    time since the last tic (or the last toc); :meth:`start` /
    :meth:`stop` accumulate the time spent between matching calls, and
    :meth:`toc` then reports the accumulated total.

    Examples:
       >>> from pyrobust.common.timing import TicTocTimer
       >>> timer = TicTocTimer()
       >>> timer.tic('starting timer') # doctest: +SKIP
       [    0.00] starting timer
       >>> dT = timer.toc('task 1') # doctest: +SKIP
       [+   0.00] task 1

    Messages go to `ostream` (``sys.stdout`` when neither `ostream` nor
    `logger` is given) and to `logger` at ``INFO`` level.
    """

    def __init__(self, ostream=_NotSpecified, logger=None):
        if ostream is _NotSpecified and logger is not None:
            ostream = None
        self.ostream = ostream
        self.logger = logger
        self.level = logging.INFO
        self._reset()

    def _reset(self):
        now = default_timer()
        self._origin = now
        # None while a start/stop timer is stopped
        self._last = now
        self._runs = 0
        self._accumulated = 0.0

    def tic(self, msg=_NotSpecified, ostream=_NotSpecified, logger=_NotSpecified):
        """Reset the timer; the next :meth:`toc` is measured from now"""
        self._reset()
        if msg is _NotSpecified:
            msg = "Resetting the tic/toc delta timer"
        if msg is not None:
            self.toc(msg, delta=False, ostream=ostream, logger=logger)

    def toc(
        self, msg=_NotSpecified, delta=True, ostream=_NotSpecified, logger=_NotSpecified
    ):
        """Report and return the elapsed time.

        Args:
            msg (str): message to report; the calling location is used
                when omitted, and nothing is reported when None
            delta (bool): measure from the most recent :meth:`tic` or
                :meth:`toc` (True) or from the most recent :meth:`tic`
                only (False)
        """
        if msg is _NotSpecified:
            caller = sys._getframe(1)
            msg = 'File "%s", line %s in %s' % (
                caller.f_code.co_filename,
                caller.f_lineno,
                caller.f_code.co_name,
            )
        now = default_timer()
        if self._runs or self._last is None:
            elapsed = self._accumulated
            if self._last is not None:
                elapsed += now - self._last
            line = "[%8.2f|%4d] %s" % (elapsed, self._runs, msg)
        elif delta:
            elapsed = now - self._last
            self._last = now
            line = "[+%7.2f] %s" % (elapsed, msg)
        else:
            elapsed = now - self._origin
            line = "[%8.2f] %s" % (elapsed, msg)
        if msg is not None:
            self._emit(line, ostream, logger)
        return elapsed

    def _emit(self, line, ostream, logger):
        if logger is _NotSpecified:
            logger = self.logger
        if logger is not None:
            logger.log(self.level, line)
        if ostream is _NotSpecified:
            ostream = self.ostream
            if ostream is _NotSpecified:
                ostream = sys.stdout if logger is None else None
        if ostream is not None:
            ostream.write(line + '\n')

    def start(self):
        if self._runs and self._last is not None:
            self.stop()
        self._runs += 1
        self._last = default_timer()

    def stop(self):
        if self._last is None:
            raise RuntimeError("Stopping a TicTocTimer that was already stopped")
        interval = default_timer() - self._last
        self._last = None
        self._accumulated += interval
        return interval

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, et, ev, tb):
        self.stop()


_HEADER = '{:<{w}}{:>9} {:>9} {:>9} {:>6}'
_ROW = '{:<{w}}{:>9d} {:>9.3f} {:>9.3f} {:>6.1f}'
_OTHER = '{:<{w}}{:>9} {:>9.3f} {:>9} {:>6.1f}'


def _percent(part, whole):
    return part / whole * 100 if whole > 0 else float('nan')


class _TimerNode(object):
    def __init__(self):
        self.clock = TicTocTimer(ostream=None)
        self.children = {}
        self.total_time = 0.0
        self.n_calls = 0

    def collect(self, prefix, ans):
        for name, child in self.children.items():
            ans.append(prefix + name)
            child.collect(prefix + name + '.', ans)

    def format_children(self, indent, widths, name_width, lines):
        """Rows of the children of a timer, followed by the time spent
        in the timer outside of its children"""
        if not self.children:
            return
        w = name_width - len(indent)
        lines.append(indent + '-' * (w + 36))
        other = self.total_time
        for name, child in sorted(self.children.items()):
            lines.append(
                indent
                + _ROW.format(
                    name,
                    child.n_calls,
                    child.total_time,
                    child.total_time / child.n_calls,
                    _percent(child.total_time, self.total_time),
                    w=w,
                )
            )
            child.format_children(
                indent + ' ' * widths[0], widths[1:], name_width, lines
            )
            other -= child.total_time
        lines.append(
            indent
            + _OTHER.format(
                'other', 'n/a', other, 'n/a', _percent(other, self.total_time), w=w
            )
        )
        lines.append(indent + '=' * (w + 36))


class HierarchicalTimer(object):
    """Nested named timers.

    A timer started while another one is running becomes its child, so
    the same identifier may appear under several parents.  Timers are
    addressed by their dotted path (``'main.solve'``).  The string form
    is a table of calls, cumulative time, time per call and percent of
    the parent's time for every timer.

    Examples
    --------
    >>> from pyrobust.common.timing import HierarchicalTimer
    >>> timer = HierarchicalTimer()
    >>> timer.start('all')
    >>> timer.start('a')
    >>> timer.stop('a')
    >>> timer.stop('all')
    >>> timer.get_num_calls('all.a')
    1
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Discard every timer"""
        self.stack = []
        self._root = _TimerNode()

    def _lookup(self, path):
        node = self._root
        for name in path:
            try:
                node = node.children[name]
            except KeyError:
                raise KeyError(
                    "Timer '%s' does not exist" % ('.'.join(path),)
                ) from None
        return node

    def start(self, identifier):
        """Start (or resume) the child `identifier` of the active timer"""
        parent = self._lookup(self.stack)
        node = parent.children.get(identifier)
        if node is None:
            node = parent.children[identifier] = _TimerNode()
        node.n_calls += 1
        node.clock.start()
        self.stack.append(identifier)

    def stop(self, identifier):
        """Stop the active timer, which must be `identifier`"""
        if not self.stack or self.stack[-1] != identifier:
            raise ValueError(
                "%s is not the currently active timer.  The only timer that "
                "can currently be stopped is %s" % (identifier, '.'.join(self.stack))
            )
        node = self._lookup(self.stack)
        self.stack.pop()
        node.total_time += node.clock.stop()

    def get_total_time(self, identifier):
        """Time spent in the timer with dotted path `identifier` (not
        counting a running interval)"""
        return self._lookup(identifier.split('.')).total_time

    def get_current_time(self, identifier):
        """Like :meth:`get_total_time`, but including the current
        interval of a running timer"""
        return self._lookup(identifier.split('.')).clock.toc(None)

    def get_num_calls(self, identifier):
        return self._lookup(identifier.split('.')).n_calls

    def get_total_percent_time(self, identifier):
        """Percent of the time of all top-level timers spent in
        `identifier`"""
        total = sum(node.total_time for node in self._root.children.values())
        return _percent(self.get_total_time(identifier), total)

    def get_timers(self):
        """Dotted paths of every timer, depth first"""
        ans = []
        self._root.collect('', ans)
        return ans

    def _level_widths(self):
        widths = []
        level = [self._root]
        while True:
            names = [name for node in level for name in node.children]
            if not names:
                return widths
            widths.append(max(len(name) for name in names + ['other']))
            level = [child for node in level for child in node.children.values()]

    def __str__(self):
        widths = self._level_widths() or [0]
        name_width = max(sum(widths), len('Identifier'))
        lines = [
            _HEADER.format(
                'Identifier', 'ncalls', 'cumtime', 'percall', '%', w=name_width
            ),
            '-' * (name_width + 36),
        ]
        for name, node in sorted(self._root.children.items()):
            lines.append(
                _ROW.format(
                    name,
                    node.n_calls,
                    node.total_time,
                    node.total_time / node.n_calls,
                    self.get_total_percent_time(name),
                    w=name_width,
                )
            )
            node.format_children(' ' * widths[0], widths[1:], name_width, lines)
        lines.append('=' * (name_width + 36))
        return '\n'.join(lines) + '\n'
