"""Tests for the glasswallet-route command line."""

import json
import pytest
import tempfile
from pathlib import Path
from click.testing import CliRunner

from glasswallet_routing.cli.main import cli
from glasswallet_routing.routing import JsonAgentSource


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def roster(runner, temp_data_dir):
    """Demo roster written through the CLI."""
    path = temp_data_dir / "agents.json"
    result = runner.invoke(cli, ["init-roster", str(path)])
    assert result.exit_code == 0
    return path


@pytest.fixture
def config_path(temp_data_dir):
    return str(temp_data_dir / "routing_config.json")


class TestRosterCommands:
    """Tests for roster and agent commands."""

    def test_init_roster(self, roster):
        agents = JsonAgentSource(roster).load_agents()
        assert [a.id for a in agents] == ["agent-1", "agent-2", "agent-3"]

    def test_init_roster_refuses_overwrite(self, runner, roster):
        result = runner.invoke(cli, ["init-roster", str(roster)])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_agents_lists_roster(self, runner, roster, config_path):
        result = runner.invoke(cli, ["agents", "-r", str(roster), "--config", config_path])
        assert result.exit_code == 0
        assert "agent-1" in result.output
        assert "agent-3" in result.output

    def test_status_updates_roster_file(self, runner, roster, config_path):
        result = runner.invoke(cli, ["status", "agent-2", "busy", "-r", str(roster)])
        assert result.exit_code == 0

        agents = {a.id: a for a in JsonAgentSource(roster).load_agents()}
        assert agents["agent-2"].status.value == "busy"

        listed = runner.invoke(cli, ["agents", "-r", str(roster), "-s", "busy", "--config", config_path])
        assert "agent-2" in listed.output
        assert "agent-1" not in listed.output

    def test_status_unknown_agent(self, runner, roster):
        result = runner.invoke(cli, ["status", "agent-99", "busy", "-r", str(roster)])
        assert result.exit_code == 1


class TestRouteCommand:
    """Tests for the route command."""

    def test_route_json(self, runner, roster, config_path):
        result = runner.invoke(cli, [
            "route", "-l", "lead-1",
            "--credit-score", "780",
            "--income", "120000",
            "-p", "urgent",
            "-r", str(roster),
            "--ignore-hours",
            "--json",
            "--config", config_path,
        ])
        assert result.exit_code == 0

        data = json.loads(result.output)
        assert data["recommendedAgent"] == "agent-1"
        assert data["urgencyLevel"] == "urgent"
        assert data["alternatives"] == []

    def test_route_table_output(self, runner, roster, config_path):
        result = runner.invoke(cli, [
            "route", "-l", "lead-2",
            "--previous-applications", "2",
            "-r", str(roster),
            "--ignore-hours",
            "--config", config_path,
        ])
        assert result.exit_code == 0
        assert "Sarah Mitchell" in result.output
        assert "Alternatives" in result.output

    def test_route_fails_when_everyone_offline(self, runner, roster, config_path):
        for agent_id in ("agent-1", "agent-2", "agent-3"):
            runner.invoke(cli, ["status", agent_id, "offline", "-r", str(roster)])

        result = runner.invoke(cli, [
            "route", "-l", "lead-3", "-r", str(roster), "--ignore-hours", "--config", config_path,
        ])
        assert result.exit_code == 1
        assert "Failed to route lead lead-3" in result.output


class TestConfigCommands:
    """Tests for config commands."""

    def test_config_hours(self, runner, config_path):
        result = runner.invoke(cli, ["config", "hours", "fixed", "--start", "8", "--end", "18", "--config", config_path])
        assert result.exit_code == 0

        shown = runner.invoke(cli, ["config", "show", "--config", config_path])
        assert "8:00-18:59" in shown.output

    def test_config_hours_invalid_range(self, runner, config_path):
        result = runner.invoke(cli, ["config", "hours", "fixed", "--start", "20", "--end", "9", "--config", config_path])
        assert result.exit_code == 1

    def test_config_source_requires_roster(self, runner, config_path):
        result = runner.invoke(cli, ["config", "source", "json", "--config", config_path])
        assert result.exit_code == 1
