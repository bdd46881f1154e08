"""
Gerrit REST CLI tests.

In-process tests drive ``main()`` against a fake transport. The live
smoke tests at the bottom run the CLI against a real server and are
skipped unless credentials are configured.

Run with: python -m pytest tests/test_cli.py -v
Live tests require: GERRIT_URL, GERRIT_USERNAME and GERRIT_PASSWORD
"""

import io
import json
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest
from conftest import BASE_URL, PASSWORD, USERNAME, FakeTransport, json_response

from gerrit_rest import cli
from gerrit_rest.core.response import Response
from gerrit_rest.sdk import GerritClient

# =============================================================================
# Configuration
# =============================================================================

GERRIT_URL = os.environ.get("GERRIT_URL")
GERRIT_USERNAME = os.environ.get("GERRIT_USERNAME")
GERRIT_PASSWORD = os.environ.get("GERRIT_PASSWORD")

CLI_TIMEOUT = 60  # Timeout in seconds for CLI commands


# =============================================================================
# CLI Runners
# =============================================================================


@dataclass
class CLITestResult:
    """Track result of a single CLI invocation."""

    args: list[str]
    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def run_cli(*args: str, stdin: str | None = None, timeout: int = CLI_TIMEOUT) -> CLITestResult:
    """Run the CLI in a subprocess and return a CLITestResult."""
    cmd = [sys.executable, "-m", "gerrit_rest.cli", *args]
    result = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        input=stdin,
        env=os.environ.copy(),
        timeout=timeout,
        cwd=Path(__file__).resolve().parent.parent,
    )
    return CLITestResult(list(args), result.returncode, result.stdout, result.stderr)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def run_main(monkeypatch, capsys, transport):
    """Run main() in-process with the client wired to the fake transport."""
    created = {}

    def make_client(**kwargs):
        created.update(kwargs)
        return GerritClient(BASE_URL, USERNAME, PASSWORD, transport=transport)

    monkeypatch.setattr(cli, "GerritClient", make_client)

    def run(*args: str) -> CLITestResult:
        try:
            cli.main(list(args))
            code = 0
        except SystemExit as e:
            code = e.code or 0
        out, err = capsys.readouterr()
        return CLITestResult(list(args), code, out, err)

    run.created = created
    return run


# =============================================================================
# Help Tests - All Commands Should Have Working Help
# =============================================================================


class TestHelpCommands:
    """Test that all help commands work."""

    def test_main_help(self):
        result = run_cli("--help")
        assert result.success, f"Main help failed: {result.stderr}"
        assert "Gerrit REST CLI" in result.stdout

    @pytest.mark.parametrize("command", ["get", "put", "post", "delete", "projects", "groups", "accounts", "changes"])
    def test_command_help(self, command):
        result = run_cli(command, "--help")
        assert result.success, f"{command} help failed: {result.stderr}"

    def test_no_command_prints_help(self, run_main):
        result = run_main()
        assert result.success
        assert "usage: gerrit-rest" in result.stdout


# =============================================================================
# Raw Verb Commands
# =============================================================================


class TestVerbCommands:
    def test_get(self, run_main, transport):
        transport.responses.append(json_response({"name": "myproject", "description": "x"}))

        result = run_main("get", "/projects/myproject")
        assert result.success, result.stdout
        assert json.loads(result.stdout) == {"name": "myproject", "description": "x"}
        assert transport.requests[0]["url"] == f"{BASE_URL}/a/projects/myproject"

    def test_put_json_value(self, run_main, transport):
        transport.responses.append(json_response({"id": "abc", "name": "newgroup"}, status=201))

        result = run_main("put", "/groups/newgroup", '{"description": "New group description.", "visible_to_all": true}')
        assert result.success
        assert transport.requests[0]["body"] == b'{"description":"New group description.","visible_to_all":true}'

    def test_put_string_value(self, run_main, transport):
        transport.responses.append(json_response("New description"))

        run_main("put", "/projects/myproject/description", "New description")
        assert transport.requests[0]["body"] == b'"New description"'

    def test_post_json_null_is_a_body(self, run_main, transport):
        transport.responses.append(Response(204, None))

        run_main("post", "/changes/1/abandon", "null")
        assert transport.requests[0]["body"] == b"null"

    def test_put_without_value(self, run_main, transport):
        transport.responses.append(json_response({"_account_id": 1000097}, status=201))

        run_main("put", "/groups/newgroup/members/jroe")
        assert transport.requests[0]["body"] is None

    def test_value_from_stdin(self, run_main, transport, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO('{"message": "bye"}'))
        transport.responses.append(json_response({"id": "x"}))

        run_main("post", "/changes/1/abandon", "-")
        assert transport.requests[0]["body"] == b'{"message":"bye"}'

    def test_delete(self, run_main, transport):
        transport.responses.append(Response(204, None))

        result = run_main("delete", "/groups/newgroup/members/jroe")
        assert result.success
        assert json.loads(result.stdout) is None

    def test_http_error_exit_code(self, run_main, transport):
        transport.responses.append(Response(404, "text/plain", b"Not found"))

        result = run_main("get", "/accounts/unknown")
        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert error["status"] == 404
        assert error["content"] == "Not found"
        assert result.stderr == "404: Not found\n"

    def test_flags_reach_client(self, run_main, transport):
        transport.responses.append(Response(204, None))

        run_main("--url", BASE_URL, "-u", "bob", "--timeout", "5", "--no-redirects", "delete", "/x")
        assert run_main.created["url"] == BASE_URL
        assert run_main.created["username"] == "bob"
        assert run_main.created["timeout"] == 5
        assert run_main.created["follow_redirects"] is False


# =============================================================================
# Typed Commands
# =============================================================================


class TestTypedCommands:
    def test_projects_get(self, run_main, transport):
        transport.responses.append(json_response({"id": "myproject", "name": "myproject", "description": "x"}))

        result = run_main("projects", "get", "myproject")
        assert json.loads(result.stdout)["description"] == "x"

    def test_projects_list(self, run_main, transport):
        transport.responses.append(json_response({"alpha": {"id": "alpha"}, "beta": {"id": "beta"}}))

        data = json.loads(run_main("projects", "list").stdout)
        assert data["total_count"] == 2
        assert [p["name"] for p in data["data"]] == ["alpha", "beta"]

    def test_groups_create(self, run_main, transport):
        transport.responses.append(json_response({"id": "abc", "name": "newgroup"}, status=201))

        result = run_main("groups", "create", "newgroup", "-d", "New group description.", "--visible-to-all")
        assert json.loads(result.stdout)["id"] == "abc"
        assert transport.requests[0]["body"] == b'{"description":"New group description.","visible_to_all":true}'

    def test_accounts_get_defaults_to_self(self, run_main, transport):
        transport.responses.append(json_response({"_account_id": 1000096, "username": "jdoe"}))

        result = run_main("accounts", "get")
        assert json.loads(result.stdout)["username"] == "jdoe"
        assert transport.requests[0]["url"] == f"{BASE_URL}/a/accounts/self"

    def test_changes_query(self, run_main, transport):
        transport.responses.append(
            json_response(
                [
                    {
                        "id": "p~master~I1",
                        "project": "p",
                        "branch": "master",
                        "change_id": "I1",
                        "subject": "Fix",
                        "status": "NEW",
                        "_number": 1,
                        "_more_changes": True,
                    }
                ]
            )
        )

        data = json.loads(run_main("changes", "query", "status:open", "-l", "1").stdout)
        assert data["data"][0]["number"] == 1
        assert data["more_changes"] is True

    def test_version(self, run_main, transport):
        transport.responses.append(json_response("3.9.1"))
        assert json.loads(run_main("version").stdout) == {"version": "3.9.1"}

    def test_missing_url_reports_configuration_error(self, monkeypatch, capsys):
        monkeypatch.delenv("GERRIT_URL", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["get", "/projects/"])
        assert exc_info.value.code == 1
        assert "GERRIT_URL" in json.loads(capsys.readouterr().out)["error"]


# =============================================================================
# Live Smoke Tests
# =============================================================================


@pytest.fixture(scope="session")
def require_credentials():
    """Skip test if credentials not available."""
    if not GERRIT_URL or not GERRIT_USERNAME or not GERRIT_PASSWORD:
        pytest.skip("GERRIT_URL, GERRIT_USERNAME and GERRIT_PASSWORD required")
    return True


@pytest.mark.live
class TestLiveServer:
    """Run the CLI against a real Gerrit server."""

    def test_version(self, require_credentials):
        result = run_cli("version")
        assert result.success, f"version failed: {result.stdout} {result.stderr}"
        assert json.loads(result.stdout)["version"]

    def test_accounts_self(self, require_credentials):
        result = run_cli("accounts", "get")
        assert result.success, f"accounts get failed: {result.stdout} {result.stderr}"
        assert json.loads(result.stdout)["username"] == GERRIT_USERNAME

    def test_projects_list(self, require_credentials):
        result = run_cli("projects", "list", "--limit", "5")
        assert result.success, f"projects list failed: {result.stdout} {result.stderr}"

    def test_unknown_account(self, require_credentials):
        result = run_cli("get", "/accounts/no-such-account-12345")
        assert not result.success, "Getting an unknown account should fail"
        assert json.loads(result.stdout)["status"] == 404
