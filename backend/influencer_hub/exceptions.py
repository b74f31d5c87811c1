"""Exceptions raised by the unification and scoring services."""


class InfluencerHubError(Exception):
    """Base class for errors raised by this package."""


class StoreUnavailableError(InfluencerHubError):
    """
    The backing store cannot be reached.

    This is the only failure that aborts a whole unification pass; the pass
    is meant to be retried as a unit.
    """


class UnificationInProgressError(InfluencerHubError):
    """A unification pass is already running in this process."""
