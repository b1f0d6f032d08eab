"""Error taxonomy shared by gateways, services and the web layer.

A missing record is not an error: reads return None.

Hierarchy:
- TrackAcademiaError
  - ValidationError: a required field is empty or a field may not be written
  - Unauthorized: acting identity does not own the record (or none signed in)
  - PersistenceError: remote store transport/quota/permission failure
  - UploadError: cover upload rejected or failed
  - AuthError: identity provider failures
    - InvalidCredentials
    - AccountAlreadyExists
    - WeakPassword
    - NetworkError
"""

from __future__ import annotations


class TrackAcademiaError(Exception):
    """Base class for all application errors."""

    pass


class ValidationError(TrackAcademiaError):
    """Input failed validation before reaching the store."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class Unauthorized(TrackAcademiaError):
    """Acting identity is missing or does not own the record."""

    pass


class PersistenceError(TrackAcademiaError):
    """The remote document store failed to complete an operation."""

    def __init__(self, message: str, collection: str | None = None):
        self.collection = collection
        super().__init__(message)


class UploadError(TrackAcademiaError):
    """Cover image was rejected or the upload transport failed."""

    def __init__(self, message: str, rejected: bool = False):
        self.rejected = rejected
        super().__init__(message)


class AuthError(TrackAcademiaError):
    """Identity provider failure with a human-readable message."""

    def __init__(self, message: str, code: str | None = None):
        self.code = code
        super().__init__(message)


class InvalidCredentials(AuthError):
    pass


class AccountAlreadyExists(AuthError):
    pass


class WeakPassword(AuthError):
    pass


class NetworkError(AuthError):
    pass
