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

"""
Timing and iteration-log helpers of the robust solver.
"""

from contextlib import contextmanager
import timeit

from pyrobust.common.timing import HierarchicalTimer


class TimingData:
    """
    Stage timers of a robust solve.

    A thin layer over :class:`HierarchicalTimer` that only accepts the
    stage identifiers listed in `hierarchical_timer_full_ids`, so that
    every solve reports the same breakdown.

    Attributes
    ----------
    main_timer_start_time : float or None
        Wall-clock time at which the main timer was entered.
    """

    hierarchical_timer_full_ids = {
        "main",
        "main.expansion",
        "main.setup",
        "main.reformulation",
        "main.solve",
        "main.separation",
    }

    def __init__(self):
        self._timer = HierarchicalTimer()
        self.main_timer_start_time = None

    def __str__(self):
        return str(self._timer)

    def _leaf(self, full_identifier):
        if full_identifier not in self.hierarchical_timer_full_ids:
            raise ValueError(
                "Robust solver timing data object does not support timing "
                f"ID: {full_identifier}."
            )
        return full_identifier.rsplit(".", 1)[-1]

    def start_timer(self, full_identifier):
        self._timer.start(self._leaf(full_identifier))

    def stop_timer(self, full_identifier):
        self._timer.stop(self._leaf(full_identifier))

    def get_total_time(self, full_identifier):
        """Total time (s) spent in a stage"""
        return self._timer.get_total_time(full_identifier)

    def get_num_calls(self, full_identifier):
        return self._timer.get_num_calls(full_identifier)

    def get_main_elapsed_time(self):
        """Time (s) since the main timer was entered; valid while it runs"""
        return self._timer.get_current_time("main")


@contextmanager
def time_code(timing_data_obj, code_block_name, is_main_timer=False):
    """Time the body of a ``with`` block as the stage `code_block_name`

    With ``is_main_timer=True`` the entry time is also recorded on
    `timing_data_obj`, so that the elapsed time of the solve can be
    queried while it runs (see :func:`get_main_elapsed_time`).
    """
    timing_data_obj.start_timer(code_block_name)
    if is_main_timer:
        timing_data_obj.main_timer_start_time = timeit.default_timer()
    try:
        yield
    finally:
        timing_data_obj.stop_timer(code_block_name)


def get_main_elapsed_time(timing_data_obj):
    return timing_data_obj.get_main_elapsed_time()


def get_remaining_time(timing_data_obj, config):
    """Wall time left before ``config.time_limit`` (None if no limit)"""
    if config.time_limit is None:
        return None
    return max(config.time_limit - get_main_elapsed_time(timing_data_obj), 0.0)


class IterationLogRecord:
    """
    One line of the cutting-plane iteration log.

    Parameters
    ----------
    iteration : int or None
        Iteration number.
    objective : float or None
        Objective value of the deterministic model.
    num_cuts : int or None
        Total number of cuts added so far.
    num_violated_cons : int or None
        Number of uncertain constraints violated by the candidate.
    max_violation : float or None
        Largest violation found by the separation step.
    elapsed_time : float
        Wall time (s) since the start of the solve.

    Missing values are shown as ``-``.
    """

    _LINE_LENGTH = 78
    # attribute, header, column width, value format
    _COLUMNS = (
        ("iteration", "Itn", 5, "{:d}"),
        ("objective", "Objective", 13, "{: .4e}"),
        ("num_cuts", "#Cuts", 8, "{:d}"),
        ("num_violated_cons", "#CViol", 8, "{:d}"),
        ("max_violation", "Max Viol", 13, "{:.4e}"),
        ("elapsed_time", "Wall Time (s)", 13, "{:.3f}"),
    )

    def __init__(
        self,
        iteration,
        objective,
        num_cuts,
        num_violated_cons,
        max_violation,
        elapsed_time,
    ):
        self.iteration = iteration
        self.objective = objective
        self.num_cuts = num_cuts
        self.num_violated_cons = num_violated_cons
        self.max_violation = max_violation
        self.elapsed_time = elapsed_time

    def get_log_str(self):
        cells = []
        for attr, _, width, fmt in self._COLUMNS:
            val = getattr(self, attr)
            cells.append((fmt.format(val) if val is not None else "-").ljust(width))
        return "".join(cells)

    def log(self, log_func, **log_func_kwargs):
        log_func(self.get_log_str(), **log_func_kwargs)

    @classmethod
    def get_log_header_str(cls):
        return "".join(header.ljust(width) for _, header, width, _ in cls._COLUMNS)

    @classmethod
    def log_header(cls, log_func, with_rules=True, **log_func_kwargs):
        """Log the column headers, framed by rules if `with_rules`"""
        rule = "-" * cls._LINE_LENGTH
        lines = [rule, cls.get_log_header_str(), rule]
        for line in lines if with_rules else lines[1:2]:
            log_func(line, **log_func_kwargs)
