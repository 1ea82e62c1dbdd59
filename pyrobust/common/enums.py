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

"""Enums shared by the modeling layer and the solvers

.. autosummary::

   ObjectiveSense
"""

import enum


class NamedIntEnum(enum.IntEnum):
    """IntEnum whose members can also be looked up by name
    (``ObjectiveSense('maximize')``)"""

    @classmethod
    def _missing_(cls, value):
        return cls.__members__.get(value) if isinstance(value, str) else None


class ObjectiveSense(NamedIntEnum):
    """Direction of an objective.

    The value is the sign that turns the objective into one to be
    minimized.
    """

    minimize = 1
    maximize = -1

    def __str__(self):
        return self.name


minimize = ObjectiveSense.minimize
maximize = ObjectiveSense.maximize
