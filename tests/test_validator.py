import pytest

from intake.core.exceptions import ValidationError
from intake.services.validator import is_email, is_mobile_phone, validate_submission


@pytest.mark.parametrize("value", ["ann@x.com", "first.last+tag@mail.co.uk", " bob@company.org "])
def test_accepts_valid_emails(value):
    assert is_email(value)


@pytest.mark.parametrize("value", ["not-an-email", "ann@", "@x.com", "ann@@x.com", "", None, 42])
def test_rejects_invalid_emails(value):
    assert not is_email(value)


@pytest.mark.parametrize("value", ["+14155550100", "14155550100", "+1 (415) 555-0100", "+44 7911 123456", "9876543210"])
def test_accepts_valid_mobiles(value):
    assert is_mobile_phone(value)


@pytest.mark.parametrize("value", ["12345", "+0123456789", "phone", "+1415555010012345", "", None, 14155550100])
def test_rejects_invalid_mobiles(value):
    assert not is_mobile_phone(value)


def test_email_is_checked_before_mobile():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"email": "nope", "mobile": "nope"})

    assert exc_info.value.message == "Invalid email"
    assert exc_info.value.field == "email"
    assert exc_info.value.status_code == 400


def test_invalid_mobile_reported_when_email_ok():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({"email": "ann@x.com", "mobile": "12"})

    assert exc_info.value.message == "Invalid mobile number"


def test_valid_submission_passes():
    assert validate_submission({"email": "ann@x.com", "mobile": "+14155550100"}) is None
