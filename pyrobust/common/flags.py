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


class FlagType(type):
    """Metaclass of sentinel classes.

    A sentinel class stands for itself: "instantiating" it returns the
    class, and it prints as its bare name.
    """

    def __new__(mcs, name, bases, dct):
        dct["__new__"] = lambda cls, *args, **kwargs: cls
        return super().__new__(mcs, name, bases, dct)

    def __repr__(cls):
        return "%s.%s" % (cls.__module__, cls.__qualname__)

    def __str__(cls):
        return cls.__name__


class NOTSET(object, metaclass=FlagType):
    """Default for optional arguments where None is a meaningful value

    >>> def set_option(value=NOTSET):
    ...     if value is NOTSET:
    ...         pass  # keep the current value
    """
