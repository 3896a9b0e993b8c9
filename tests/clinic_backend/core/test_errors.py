import pytest

from clinic_backend.core.errors import ConflictError, DataAccessError, NotFoundError, ValidationError, failure_prefix


def test_error_classes_carry_http_status_codes() -> None:
    assert ValidationError('x').status_code == 400
    assert NotFoundError('x').status_code == 404
    assert ConflictError('x').status_code == 409
    assert DataAccessError('x').status_code == 503


def test_failure_prefix_keeps_error_class_and_prefixes_message() -> None:
    with pytest.raises(ConflictError) as exception_info:
        with failure_prefix('create appointment'):
            raise ConflictError('This slot is no longer available')

    assert exception_info.value.message == 'Failed to create appointment: This slot is no longer available'
    assert isinstance(exception_info.value.__cause__, ConflictError)


def test_failure_prefix_leaves_other_exceptions_alone() -> None:
    with pytest.raises(KeyError):
        with failure_prefix('create appointment'):
            raise KeyError('patientId')
