"""
Exception types shared by the store and the selection workflow.
"""

from typing import List, Optional


class PersistenceFailure(Exception):
    """Raised when a batch of records could not be stored."""
    pass


class InvalidRecordError(PersistenceFailure):
    """Raised when a batch fails validation before reaching the datastore."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = list(errors or [])


class InputFormatError(ValueError):
    """Operator typed something that is not a customer id."""

    def __init__(self, token: str):
        super().__init__(f"Not a number: {token!r}")
        self.token = token


class LookupMiss(LookupError):
    """Token parsed fine but nothing in the roster matches it."""

    def __init__(self, kind: str, token):
        super().__init__(f"No {kind} matches {token!r}")
        self.kind = kind
        self.token = token
