"""Tests for the command-line client with a scripted transport."""

from unittest.mock import patch

import pytest

from conftest import reports_body, respond, run
from wildwaste import main as cli
from wildwaste.models import Scope

LOGIN_OK = respond({"status": "success", "message": "ok", "user_id": 7, "username": "budi"})


class _ClosableFakeApi:
    """Adds the async context manager protocol to a FakeApi."""

    def __init__(self, api):
        self._api = api

    def __getattr__(self, name):
        return getattr(self._api, name)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


@pytest.fixture
def credentials():
    with patch("wildwaste.main._collect_credentials", return_value=("budi", "secret")):
        yield


class TestRun:
    def test_map(self, api):
        api.script("list_reports", respond(reports_body(2, 1)))

        output = run(cli.run("map", [], api=_ClosableFakeApi(api)))

        assert "| 2 | Plastic 2 |" in output
        assert output.index("| 2 |") < output.index("| 1 |")

    def test_history_logs_in_first(self, api, credentials):
        api.script("login", LOGIN_OK)
        api.script("list_reports", respond(reports_body(5)))

        output = run(cli.run("history", [], api=_ClosableFakeApi(api)))

        assert api.calls[1] == ("list_reports", Scope.for_user(7))
        assert "#5" in output

    def test_report_submits_and_refreshes(self, api, credentials):
        api.script("login", LOGIN_OK)
        api.script("submit_report", respond({"status": "success", "message": "ok"}))
        api.script("list_reports", respond(reports_body(1)))

        output = run(cli.run(
            "report", ["-7.25", "112.75", "Glass", "2", "near", "the", "bridge"],
            api=_ClosableFakeApi(api),
        ))

        draft = api.calls[1][1]
        assert draft.user_id == 7
        assert draft.notes == "near the bridge"
        assert "| 1 |" in output

    def test_delete(self, api, credentials):
        api.script("login", LOGIN_OK)
        api.script("delete_report", respond({"status": "success", "message": "deleted"}))
        api.script("list_reports", respond(reports_body()))

        output = run(cli.run("delete", ["42"], api=_ClosableFakeApi(api)))

        assert ("delete_report", 42) in api.calls
        assert "haven't submitted" in output

    def test_report_succeeds_even_if_refresh_fails(self, api, credentials, capsys):
        api.script("login", LOGIN_OK)
        api.script("submit_report", respond({"status": "success", "message": "ok"}))
        api.script("list_reports", respond("oops", 500))

        output = run(cli.run("report", ["-7.25", "112.75", "Glass", "2"], api=_ClosableFakeApi(api)))

        captured = capsys.readouterr()
        assert "Report Submitted Successfully!" in captured.out
        assert "could not refresh reports: Failed to fetch reports" in captured.err
        assert output == ""

    def test_delete_succeeds_even_if_refresh_fails(self, api, credentials, capsys):
        api.script("login", LOGIN_OK)
        api.script("delete_report", respond({"status": "success", "message": "deleted"}))
        api.script("list_reports", respond("oops", 500))

        output = run(cli.run("delete", ["42"], api=_ClosableFakeApi(api)))

        captured = capsys.readouterr()
        assert "Report deleted successfully!" in captured.out
        assert "could not refresh reports" in captured.err
        assert output == ""

    def test_report_rejected_raises(self, api, credentials, capsys):
        api.script("login", LOGIN_OK)
        api.script("submit_report", respond({"status": "error", "message": "Image too large"}))

        with pytest.raises(cli.CommandFailed, match="Image too large"):
            run(cli.run("report", ["-7.25", "112.75", "Glass", "2"], api=_ClosableFakeApi(api)))

        assert "Submitted" not in capsys.readouterr().out
        assert api.count("list_reports") == 0

    def test_login_failure_raises(self, api, credentials):
        api.script("login", respond({"status": "error", "message": "Invalid credentials"}))

        with pytest.raises(cli.CommandFailed, match="Invalid credentials"):
            run(cli.run("history", [], api=_ClosableFakeApi(api)))

    def test_fetch_failure_raises(self, api):
        api.script("list_reports", respond("oops", 500))

        with pytest.raises(cli.CommandFailed, match="Failed to fetch reports"):
            run(cli.run("map", [], api=_ClosableFakeApi(api)))

    def test_unknown_command(self, api):
        with pytest.raises(ValueError, match="Unknown command"):
            run(cli.run("dance", [], api=_ClosableFakeApi(api)))


class TestMain:
    def test_help(self, capsys):
        with patch("sys.argv", ["wildwaste"]):
            cli.main()
        assert "Usage" in capsys.readouterr().out

    def test_failure_exits_1(self, capsys):
        async def failing(command, args):
            raise cli.CommandFailed("Connection error: refused")

        with patch("sys.argv", ["wildwaste", "map"]), patch("wildwaste.main.run", failing):
            with pytest.raises(SystemExit) as excinfo:
                cli.main()

        assert excinfo.value.code == 1
        assert "Connection error: refused" in capsys.readouterr().err
