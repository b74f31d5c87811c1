"""Creator identity unification and campaign scoring backend."""

__version__ = "1.0.0"
