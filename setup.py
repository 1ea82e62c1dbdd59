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
Installer for pyrobust.
"""

import os

from setuptools import setup, find_packages


def _read_version():
    # pyrobust/version/info.py is executed standalone so that the package
    # (and numpy / scipy) need not be importable at install time
    namespace = {'__name__': 'pyrobust.version.info'}
    source = os.path.join(os.path.dirname(__file__), 'pyrobust', 'version', 'info.py')
    with open(source) as FILE:
        exec(FILE.read(), namespace)
    return namespace['__version__']


setup(
    name='pyrobust',
    version=_read_version(),
    description='Oracle-based robust linear optimization',
    license='BSD-3-Clause',
    python_requires='>=3.9',
    install_requires=['ply', 'numpy', 'scipy>=1.9'],
    extras_require={'tests': ['coverage', 'parameterized', 'pytest']},
    packages=find_packages(include=("pyrobust", "pyrobust.*")),
)
