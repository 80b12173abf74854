import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from iscctl.cli import app
from iscctl.cmds.faults import Status

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_log_handlers():
    with patch("iscctl.cli.configure_logging"):
        yield


def test_dry_run_prints_request_line():
    result = runner.invoke(app, ["cmd", "run", "set-frequency", "2500", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "$FCS,1,2500"


def test_named_arguments_and_channel():
    result = runner.invoke(app, ["cmd", "run", "$SOA", "enabled=off", "soa_type=current", "-c", "2", "--dry-run"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "$SOA,2,7,0"


def test_unknown_command_and_bad_argument():
    assert runner.invoke(app, ["cmd", "run", "make-coffee", "--dry-run"]).exit_code == 2
    assert runner.invoke(app, ["cmd", "run", "set-frequency", "fast", "--dry-run"]).exit_code == 2
    assert runner.invoke(app, ["cmd", "run", "get-status", "1", "--dry-run"]).exit_code == 2


def test_list_family():
    result = runner.invoke(app, ["cmd", "list", "--family", "pwm"])
    assert result.exit_code == 0
    assert "$DCFS" in result.output
    assert "$FCS" not in result.output


def test_run_sends_through_session(fake_serial):
    ser = fake_serial({"$ST": "OK,1,0,20"})
    with patch("iscctl.scheduler.open_serial", return_value=ser):
        result = runner.invoke(app, ["cmd", "run", "get-status", "--port", "/dev/null", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["kind"] == Status.__name__
    assert data["flags"] == ["reset_detected"]
    assert ser.lines == ["$ST,1"]
    assert not ser.is_open


def test_run_reports_device_error(fake_serial):
    ser = fake_serial({"$FCS": "ERR14"})
    with patch("iscctl.scheduler.open_serial", return_value=ser):
        result = runner.invoke(app, ["cmd", "run", "set-frequency", "9999", "--port", "/dev/null"])
    assert result.exit_code == 1
    assert "invalid argument 4" in result.output


def test_config_show_empty():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "No settings saved" in result.output
