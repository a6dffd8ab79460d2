import pytest

from sumologic_connector.core.exceptions import PreconditionError
from sumologic_connector.core.validators import validate_account_profile

VALID_PROFILE = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "default_role_id": "r1",
}


def test_valid_profile_builds_request():
    request = validate_account_profile(VALID_PROFILE)
    assert request.first_name == "Ada"
    assert request.role_ids == ["r1"]


@pytest.mark.parametrize("field", ["first_name", "last_name", "email", "default_role_id"])
def test_missing_field_is_reported(field):
    profile = {k: v for k, v in VALID_PROFILE.items() if k != field}
    with pytest.raises(PreconditionError, match=f"{field} is required"):
        validate_account_profile(profile)


def test_blank_field_is_missing():
    with pytest.raises(PreconditionError, match="last_name is required"):
        validate_account_profile({**VALID_PROFILE, "last_name": "   "})


@pytest.mark.parametrize("email", ["ops@localhost", "no-at-sign"])
def test_email_format_is_left_to_the_api(email):
    request = validate_account_profile({**VALID_PROFILE, "email": email})
    assert request.email == email


def test_values_are_trimmed():
    request = validate_account_profile({**VALID_PROFILE, "email": "  ada@example.com ", "default_role_id": " r1 "})
    assert request.email == "ada@example.com"
    assert request.role_ids == ["r1"]
