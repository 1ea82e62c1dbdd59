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


class SolverFactoryClass(object):
    """Registry mapping solver names to :class:`SolverBase` subclasses

    Calling the factory with a registered name returns a new solver
    built with the remaining keyword arguments.
    """

    def __init__(self, description="solver"):
        self._description = description
        self._registry = {}

    def __call__(self, name, **kwds):
        try:
            cls, _ = self._registry[str(name)]
        except KeyError:
            raise ValueError(
                "Unknown %s: '%s' (available: %s)"
                % (self._description, name, ", ".join(sorted(self._registry)))
            ) from None
        return cls(**kwds)

    def __iter__(self):
        return iter(list(self._registry))

    def __contains__(self, name):
        return str(name) in self._registry

    def get_class(self, name):
        return self._registry[name][0]

    def doc(self, name):
        return self._registry[name][1]

    def register(self, name, doc=None):
        """Class decorator adding the solver under `name`"""

        def decorator(cls):
            cls.name = name
            self._registry[name] = (cls, doc)
            return cls

        return decorator

    def unregister(self, name):
        self._registry.pop(str(name), None)


SolverFactory = SolverFactoryClass()
