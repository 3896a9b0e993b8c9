"""Error taxonomy shared by the stores, services and HTTP layer."""

from contextlib import contextmanager
from typing import Iterator


class ClinicError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def with_prefix(self, prefix: str) -> 'ClinicError':
        return type(self)(f'{prefix}: {self.message}')


class ValidationError(ClinicError):
    status_code = 400


class NotFoundError(ClinicError):
    status_code = 404


class ConflictError(ClinicError):
    status_code = 409


class AuthorizationError(ClinicError):
    status_code = 403


class DataAccessError(ClinicError):
    status_code = 503


@contextmanager
def failure_prefix(action: str) -> Iterator[None]:
    """Re-raise any ClinicError as the same class with "Failed to <action>: " prepended."""
    try:
        yield
    except ClinicError as exc:
        raise exc.with_prefix(f'Failed to {action}') from exc
