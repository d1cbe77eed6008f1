"""Errors raised by the entry store.

The store never recovers from a failure; it translates driver and
SQLAlchemy exceptions into this small taxonomy and re-raises.
"""


class StoreError(Exception):
    """Opaque storage failure."""


class StorageError(StoreError):
    pass


class StorageUnavailable(StoreError):
    """The database could not be reached."""


class ConstraintViolation(StoreError):
    """A write was rejected by a table constraint."""


class NotFound(StoreError):
    pass
