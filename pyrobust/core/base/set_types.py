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

"""Domains for variables and uncertain parameters."""

import math


class RealDomain(object):
    """A (possibly bounded) interval domain of real or integer numbers.

    The domain bounds are intersected with the bounds given when a
    variable or uncertain parameter is declared.
    """

    __slots__ = ('name', 'is_integer', 'bounds')

    def __init__(self, name, is_integer=False, bounds=(-math.inf, math.inf)):
        self.name = name
        self.is_integer = is_integer
        self.bounds = bounds

    def __contains__(self, val):
        lb, ub = self.bounds
        if not lb <= val <= ub:
            return False
        return not self.is_integer or float(val).is_integer()

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.name


Reals = RealDomain('Reals')
NonNegativeReals = RealDomain('NonNegativeReals', bounds=(0, math.inf))
Integers = RealDomain('Integers', is_integer=True)
NonNegativeIntegers = RealDomain('NonNegativeIntegers', True, (0, math.inf))
Binary = RealDomain('Binary', is_integer=True, bounds=(0, 1))
