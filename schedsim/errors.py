from __future__ import annotations


class SchedulerError(ValueError):
    """
    Base class for every error the simulator reports to its caller.

    Subclasses ValueError so callers that already guard against bad input
    with ``except ValueError`` keep working.
    """


class InvalidWorkloadError(SchedulerError):
    pass


class InvalidQuantumError(SchedulerError):
    pass


class UnknownAlgorithmError(SchedulerError):
    pass
