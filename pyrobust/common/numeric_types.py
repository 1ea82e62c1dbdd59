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

#: Types taken as numeric constants in expressions (bool is not one).
native_numeric_types = {int, float, np.int32, np.int64, np.float32, np.float64}


def is_numeric(obj):
    """Return True if `obj` is a (non-boolean) numeric constant"""
    if obj.__class__ in native_numeric_types:
        return True
    if isinstance(obj, bool):
        return False
    return isinstance(obj, (int, float, np.integer, np.floating))


def string_intclamp(val):
    """Render a number, dropping the decimal point for integral values.

    ``string_intclamp(2.0)`` is ``'2'`` and ``string_intclamp(2.5)`` is
    ``'2.5'``.  Infinite values are rendered as ``inf`` / ``-inf``.
    """
    val = float(val)
    if val != val or val in (float('inf'), float('-inf')):
        return str(val)
    if val == int(val):
        return str(int(val))
    return repr(val)
