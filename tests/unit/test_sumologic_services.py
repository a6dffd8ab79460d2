"""API surface tests: paths, methods, decoding and operation context."""
import pytest

from sumologic_connector.core.sumologic import (
    HumanUser,
    NotFoundError,
    SumoLogicAPIError,
    TransportError,
    UserRequest,
)

BASE = "https://api.sumologic.com/api/v1"


def test_get_users_first_page(api, session):
    session.queue(200, {"data": [{"id": "2", "firstName": "Ada", "lastName": "Lovelace"}], "next": "tok-2"})

    users, next_token, _ = api.users.get_users()

    assert session.calls[0].method == "GET"
    assert session.calls[0].url == f"{BASE}/users?limit=100"
    assert [u.id for u in users] == ["2"]
    assert isinstance(users[0], HumanUser)
    assert next_token == "tok-2"


def test_get_users_with_token(api, session):
    session.queue(200, {"data": []})

    users, next_token, _ = api.users.get_users("tok-2")

    assert session.calls[0].url == f"{BASE}/users?token=tok-2&limit=100"
    assert users == []
    assert next_token is None


def test_get_user_by_id(api, session):
    session.queue(200, {"id": "42", "email": "ada@example.com"})

    user, _ = api.users.get_user_by_id("42")

    assert session.calls[0].url == f"{BASE}/users/42"
    assert user.email == "ada@example.com"


def test_get_user_not_found_is_prefixed(api, session):
    session.queue(404, {"code": "user:not_found", "message": "no such user"})

    with pytest.raises(NotFoundError) as excinfo:
        api.users.get_user_by_id("42")

    assert str(excinfo.value).startswith("get user: [404]")


def test_create_user_posts_payload(api, session):
    session.queue(200, {"id": "7", "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"})

    user, _ = api.users.create_user(UserRequest("Ada", "Lovelace", "ada@example.com", ["r1"]))

    call = session.calls[0]
    assert call.method == "POST"
    assert call.url == f"{BASE}/users"
    assert call.json == {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com", "roleIds": ["r1"]}
    assert user.id == "7"


def test_delete_user(api, session):
    session.queue(204, None, headers={"X-Ratelimit-Remaining": "9"})

    rate_limit = api.users.delete_user("7")

    assert session.calls[0].method == "DELETE"
    assert session.calls[0].url == f"{BASE}/users/7"
    assert rate_limit.remaining == 9


def test_service_accounts_have_no_pagination(api, session):
    session.queue(200, {"data": [{"id": "1", "name": "ci-bot"}]})

    accounts, _ = api.service_accounts.get_service_accounts()

    assert session.calls[0].url == f"{BASE}/serviceAccounts"
    assert [a.name for a in accounts] == ["ci-bot"]


def test_service_accounts_accept_bare_list(api, session):
    session.queue(200, [{"id": "1", "name": "ci-bot"}])

    accounts, _ = api.service_accounts.get_service_accounts()

    assert [a.id for a in accounts] == ["1"]


def test_get_roles_and_role(api, session):
    session.queue(200, {"data": [{"id": "1", "name": "baton-role"}]})
    session.queue(200, {"id": "1", "name": "baton-role", "users": ["u1", "u2"]})

    roles, next_token, _ = api.roles.get_roles()
    role, _ = api.roles.get_role("1")

    assert session.calls[0].url == f"{BASE}/roles?limit=100"
    assert session.calls[1].url == f"{BASE}/roles/1"
    assert roles[0].name == "baton-role"
    assert next_token is None
    assert role.users == ["u1", "u2"]


def test_assign_and_remove_role(api, session):
    session.queue(200, {"id": "r1", "name": "admin", "users": ["u1"]})
    session.queue(204, None)

    role, _ = api.roles.assign_role_to_user("r1", "u1")
    api.roles.remove_role_from_user("r1", "u1")

    assert (session.calls[0].method, session.calls[0].url) == ("PUT", f"{BASE}/roles/r1/users/u1")
    assert (session.calls[1].method, session.calls[1].url) == ("DELETE", f"{BASE}/roles/r1/users/u1")
    assert role.users == ["u1"]


def test_assign_role_error_names_operation(api, session):
    session.queue(400, {"code": "role:invalid", "message": "bad"})

    with pytest.raises(SumoLogicAPIError) as excinfo:
        api.roles.assign_role_to_user("r1", "u1")

    assert excinfo.value.operation == "assign role to user"


def test_malformed_record_raises_transport_error(api, session):
    session.queue(200, {"data": [{"name": "no id"}]})

    with pytest.raises(TransportError) as excinfo:
        api.roles.get_roles()

    assert excinfo.value.operation == "list roles"
