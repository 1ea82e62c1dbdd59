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

# releaselevel is 'devel' between releases and 'final' on a release;
# the numbers always name the next release.
major, minor, micro = 0, 3, 0
releaselevel = 'final'
serial = 0

version_info = (major, minor, micro, releaselevel, serial)

__version__ = f'{major}.{minor}.{micro}'
if releaselevel == 'devel':
    __version__ += f'.dev{serial}'

version = __version__ if releaselevel == 'final' else f'{__version__} ({releaselevel})'
