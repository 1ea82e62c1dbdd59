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

import pytest

_implicit_markers = {'default'}
_solver_markers = _implicit_markers.union({'solver'})


def pytest_addoption(parser):
    """Restrict the run to the tests exercising one solver"""
    parser.addoption(
        "--solver",
        action="store",
        metavar="SOLVER",
        help="Only run tests marked with solver(SOLVER).",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "solver(name): test needs the named solver to be available"
    )
    config.addinivalue_line("markers", "default: unmarked tests")


def pytest_collection_modifyitems(items):
    """Tag every unmarked test with the 'default' marker"""
    for item in items:
        if next(item.iter_markers(), None) is None:
            for marker in _implicit_markers:
                item.add_marker(getattr(pytest.mark, marker))


def pytest_runtest_setup(item):
    """Decide whether a collected test runs.

    With ``--solver NAME`` only tests marked ``solver(NAME)`` run.  With
    ``-m`` pytest's own selection applies.  Otherwise default and solver
    tests run, and a solver test is skipped when its solver is not
    available in this environment.
    """
    solvernames = [mark.args[0] for mark in item.iter_markers(name="solver")]
    solveroption = item.config.getoption("--solver")
    if solveroption:
        if solveroption not in solvernames:
            pytest.skip("Test not marked solver(%r)" % (solveroption,))
    elif not item.config.getoption("-m"):
        markers = set(mark.name for mark in item.iter_markers())
        if markers and not markers.issubset(_solver_markers):
            pytest.skip("Only running default and solver tests")
    for name in solvernames:
        _skip_unavailable(name)


def _skip_unavailable(name):
    from pyrobust.solvers import SolverFactory

    if name not in SolverFactory:
        pytest.skip("Solver %r is not registered" % (name,))
    avail = SolverFactory(name).available()
    if not avail:
        pytest.skip("Solver %r is not available (%s)" % (name, avail))
