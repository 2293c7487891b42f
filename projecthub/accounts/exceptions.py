"""Exceptions raised by the accounts app."""


class PersistenceError(Exception):
    """Raised when a profile write could not be stored.

    Wraps the underlying :class:`django.db.DatabaseError`; callers decide
    whether to retry.
    """
