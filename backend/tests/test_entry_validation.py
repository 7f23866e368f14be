import pytest

from puppy_spa.services.errors import ConflictError, InternalError, InvalidInputError, NotFoundError
from puppy_spa.utils.entry_validation import clean_text, validate_entry_fields
from puppy_spa.utils.http_errors import http_error_for
from puppy_spa.utils.sql import scalar_int


def test_valid_with_puppy_only():
    result = validate_entry_fields(None, "Max", "Grooming")
    assert result.is_valid
    assert result.errors == []
    assert result.owner_name is None
    assert result.puppy_name == "Max"


def test_valid_with_owner_only():
    assert validate_entry_fields("John Doe", None, "Bath").is_valid


def test_blank_names_count_as_missing():
    result = validate_entry_fields("  ", "", "Grooming")
    assert not result.is_valid
    assert result.errors == ["Either owner_name or puppy_name must be provided"]


def test_missing_service_reported_alongside_names():
    result = validate_entry_fields(None, None, "   ")
    assert len(result.errors) == 2
    assert result.service_required is None


def test_values_are_trimmed():
    result = validate_entry_fields("  Jane ", " Bella", " Nail trim ")
    assert (result.owner_name, result.puppy_name, result.service_required) == ("Jane", "Bella", "Nail trim")


def test_clean_text():
    assert clean_text(None) is None
    assert clean_text(" \t") is None
    assert clean_text(" x ") == "x"


@pytest.mark.parametrize("value, expected", [(3, 3), (None, 0), ((7,), 7), ((None,), 0), ([2], 2)])
def test_scalar_int(value, expected):
    assert scalar_int(value) == expected


@pytest.mark.parametrize(
    "exc, status",
    [
        (InvalidInputError("bad date"), 400),
        (NotFoundError("missing"), 404),
        (ConflictError("taken"), 409),
    ],
)
def test_http_error_for_domain_errors(exc, status):
    http_exc = http_error_for(exc)
    assert http_exc.status_code == status
    assert http_exc.detail == str(exc)


def test_http_error_for_internal_hides_detail():
    http_exc = http_error_for(InternalError("Failed to remove entry: connection reset by peer"))
    assert http_exc.status_code == 500
    assert http_exc.detail == "Internal server error"
