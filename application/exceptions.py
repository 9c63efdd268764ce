"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
"""


class WorkoutPersistenceError(Exception):
    """Error during the atomic write of reconciled workout operations.

    Raised by persistence adapters when removals, creates, updates and
    association changes could not be applied as one transaction. Callers
    treat it as an opaque failure and do not inspect its details.
    """

    pass
