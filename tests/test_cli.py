import json
import sys
from types import SimpleNamespace

import pytest

import scripts.connector as cli
from sumologic_connector import audit
from sumologic_connector.config import ConfigurationError, ConnectorConfig
from sumologic_connector.core.connector import Connector
from sumologic_connector.core.sumologic import SumoLogicAPI, SumoLogicClient


@pytest.fixture(autouse=True)
def restore_sys_argv():
    """Make sure every test sees a clean CLI invocation."""
    original = sys.argv[:]
    yield
    sys.argv = original


@pytest.fixture()
def wired(monkeypatch, session):
    """Route the CLI through a connector backed by the fake session."""
    config = ConnectorConfig(api_access_id="id", api_access_key="key")
    monkeypatch.setattr(cli, "load_settings", lambda: config)

    def fake_build(cfg):
        assert cfg is config
        client = SumoLogicClient(cfg.api_base_url, cfg.api_access_id, cfg.api_access_key, session=session)
        return Connector(SumoLogicAPI.from_client(client))

    monkeypatch.setattr(cli, "build_connector", fake_build)
    return session


def test_no_command_prints_help(monkeypatch, capsys):
    def fail_if_called():
        raise AssertionError("settings should not be loaded without a command")

    monkeypatch.setattr(cli, "load_settings", fail_if_called)
    sys.argv = ["connector.py"]

    cli.main()

    assert "usage" in capsys.readouterr().out


def test_missing_credentials_exit_non_zero(monkeypatch, capsys):
    def missing():
        raise ConfigurationError("SUMO_API_ACCESS_KEY not found")

    monkeypatch.setattr(cli, "load_settings", missing)
    sys.argv = ["connector.py", "list-roles"]

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert "SUMO_API_ACCESS_KEY" in capsys.readouterr().err


def test_list_roles_prints_json(wired, capsys):
    wired.queue(200, {"data": [{"id": "1", "name": "baton-role", "description": "Test Role"}], "next": "n"})
    wired.queue(200, {"data": [{"id": "2", "name": "other"}]})
    sys.argv = ["connector.py", "list-roles"]

    cli.main()

    roles = json.loads(capsys.readouterr().out)
    assert [r["display_name"] for r in roles] == ["baton-role", "other"]
    assert roles[0]["id"] == {"resource_type": "role", "resource": "1"}


def test_list_users_includes_service_accounts(wired, capsys):
    wired.queue(200, {"data": [{"id": "1", "name": "ci-bot"}]})
    wired.queue(200, {"data": [{"id": "2", "firstName": "Ada", "lastName": "Lovelace"}]})
    sys.argv = ["connector.py", "list-users"]

    cli.main()

    users = json.loads(capsys.readouterr().out)
    assert [u["user_trait"]["account_type"] for u in users] == ["service", "human"]


def test_grant_calls_assign(wired, capsys):
    wired.queue(200, None)
    sys.argv = ["connector.py", "grant", "--role-id", "r1", "--user-id", "u1"]

    cli.main()

    assert wired.calls[0].method == "PUT"
    assert wired.calls[0].url.endswith("/roles/r1/users/u1")
    assert json.loads(capsys.readouterr().out) == {"granted": "r1", "user_id": "u1"}


def test_revoke_failure_exits_non_zero(wired, capsys):
    wired.queue(404, {"code": "role:not_found", "message": "missing"})
    sys.argv = ["connector.py", "revoke", "--role-id", "r1", "--user-id", "u1"]

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "[revoke] Error" in err
    assert "failed to revoke role from user" in err


def test_create_user_uses_profile(wired, capsys):
    wired.queue(200, {"id": "7", "firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"})
    sys.argv = [
        "connector.py",
        "create-user",
        "--first-name", "Ada",
        "--last-name", "Lovelace",
        "--email", "ada@example.com",
        "--default-role-id", "r1",
    ]

    cli.main()

    assert wired.calls[0].json["roleIds"] == ["r1"]
    created = json.loads(capsys.readouterr().out)
    assert created["id"]["resource"] == "7"


def test_validate_prints_rate_limit(monkeypatch, capsys):
    fake = SimpleNamespace(validate=lambda: SimpleNamespace(rate_limit=None))
    monkeypatch.setattr(cli, "load_settings", lambda: ConnectorConfig(api_access_id="id", api_access_key="key"))
    monkeypatch.setattr(cli, "build_connector", lambda cfg: fake)
    sys.argv = ["connector.py", "validate"]

    cli.main()

    assert json.loads(capsys.readouterr().out) == {"valid": True, "rate_limit": None}


def test_malformed_base_url_exits_non_zero(monkeypatch, capsys):
    config = ConnectorConfig(api_access_id="id", api_access_key="key", api_base_url="api.sumologic.com")
    monkeypatch.setattr(cli, "load_settings", lambda: config)
    sys.argv = ["connector.py", "list-roles"]

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "[list-roles] Error" in err
    assert "error parsing API base URL 'api.sumologic.com'" in err


def test_verify_audit_reports_signature_counts(temp_audit_dir, monkeypatch, capsys):
    def fail_if_called():
        raise AssertionError("verify-audit needs no credentials")

    monkeypatch.setattr(cli, "load_settings", fail_if_called)
    audit.log_provisioning_event("role_grant", "user:u1", details={"role_id": "r1"})
    sys.argv = ["connector.py", "verify-audit"]

    cli.main()

    assert json.loads(capsys.readouterr().out) == {"total": 1, "valid": 1}


def test_verify_audit_fails_on_tampered_log(temp_audit_dir, capsys):
    _, audit_file = temp_audit_dir
    audit.log_provisioning_event("role_grant", "user:u1", details={"role_id": "r1"})
    event = json.loads(audit_file.read_text())
    event["target"] = "user:u2"
    audit_file.write_text(json.dumps(event) + "\n")
    sys.argv = ["connector.py", "verify-audit"]

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert json.loads(capsys.readouterr().out) == {"total": 1, "valid": 0}
