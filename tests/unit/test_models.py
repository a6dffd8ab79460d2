from datetime import datetime, timezone

from sumologic_connector.core.sumologic import ApiPage, ErrorResponse, HumanUser, Role, ServiceAccount, UserRequest
from sumologic_connector.core.sumologic.models import format_timestamp, parse_timestamp


def test_parse_timestamp_variants():
    expected = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-02T03:04:05Z") == expected
    assert parse_timestamp("2024-01-02T03:04:05.123Z").replace(microsecond=0) == expected
    assert parse_timestamp("2024-01-02T03:04:05") == expected
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2024-01-02T03:04:05Z"
    assert format_timestamp(None) == ""


def test_human_user_from_dict_keeps_absent_fields_unset():
    user = HumanUser.from_dict({
        "id": "0000000000000002",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "roleIds": ["r1"],
        "createdAt": "2024-01-02T03:04:05Z",
        "createdBy": "0000000000000001",
    })
    assert user.id == "0000000000000002"
    assert user.full_name == "Ada Lovelace"
    assert user.role_ids == ["r1"]
    assert user.is_active is None
    assert user.is_locked is None
    assert user.is_mfa_enabled is None
    assert user.last_login_timestamp is None
    assert user.modified_at is None


def test_service_account_from_dict():
    account = ServiceAccount.from_dict({"id": "1", "name": "ci-bot", "email": "ci@example.com", "isActive": False})
    assert account.name == "ci-bot"
    assert account.is_active is False


def test_role_distinguishes_missing_members_from_empty():
    assert Role.from_dict({"id": "1", "name": "a"}).users is None
    assert Role.from_dict({"id": "1", "name": "a", "users": []}).users == []
    assert Role.from_dict({"id": "1", "name": "a", "users": [12]}).users == ["12"]


def test_error_response_describe():
    err = ErrorResponse.from_dict({"code": "c", "message": "m"})
    assert err.describe() == "code: c, message: m, target: none"


def test_user_request_payload():
    payload = UserRequest("Ada", "Lovelace", "ada@example.com", ["r1"]).to_payload()
    assert payload == {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "roleIds": ["r1"]}


def test_api_page_empty_next_is_none():
    assert ApiPage.from_dict({"data": [{"id": "1"}], "next": ""}).next is None
    assert ApiPage.from_dict(None).data == []
