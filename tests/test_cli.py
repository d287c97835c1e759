"""Tests for the command-line interface."""

import json
from datetime import date

import pytest
import yaml
from click.testing import CliRunner

from schema_synth.cli import cli, parse_limits

SCHEMA = {
    "enums": {"position": {"values": ["goalkeeper", "defence", "attack"]}},
    "scalars": {"Email": {}},
    "objects": {
        "team": {"fields": {
            "name": {"type": "String"},
            "wins": {"type": "Int"},
            "players": {"type": ["player"]},
        }},
        "player": {"fields": {
            "name": {"type": "String"},
            "position": {"type": "position"},
            "email": {"type": "Email"},
            "team": {"type": "team"},
        }},
    },
    "queries": {"teams": {"type": ["team"]}},
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(yaml.safe_dump(SCHEMA))
    return path


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "width": {"player": 2},
        "scalars": {"Email": {"faker": "email"}},
    }))
    return path


def read_fixture(output_dir, name):
    (run_dir,) = [p for p in output_dir.iterdir() if p.is_dir()]
    return json.loads((run_dir / f"{name}.json").read_text(encoding="utf-8")), run_dir


class TestSampleCommand:
    """Tests for `schema_synth sample`."""

    def test_writes_fixture(self, runner, schema_file, config_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--config", str(config_file),
            "--type", "player", "-n", "4", "--seed", "1", "--output-dir", str(out),
        ])

        assert result.exit_code == 0, result.output
        players, run_dir = read_fixture(out, "player")
        assert len(players) == 4
        for player in players:
            assert "@" in player["email"]
            assert len(player["team"]["players"]) <= 2

        manifest = json.loads((run_dir / "manifest.json").read_text())
        assert manifest["seed"] == 1
        assert manifest["fixtures"]["player"]["samples"] == 4

    def test_depth_option(self, runner, schema_file, config_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--config", str(config_file),
            "--type", "team", "-n", "5", "--depth", "team=0", "--output-dir", str(out),
        ])

        assert result.exit_code == 0, result.output
        teams, _ = read_fixture(out, "team")
        for team in teams:
            for player in team["players"]:
                assert "team" not in player

    def test_prints_enum_samples(self, runner, schema_file):
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--type", "position", "-n", "3", "--seed", "5",
        ])

        assert result.exit_code == 0, result.output
        assert any(value in result.output for value in ("goalkeeper", "defence", "attack"))

    def test_missing_scalar_strategy(self, runner, schema_file):
        result = runner.invoke(cli, ["sample", "--schema", str(schema_file), "--type", "player"])

        assert result.exit_code == 1
        assert "Email" in result.output

    def test_unknown_type(self, runner, schema_file):
        result = runner.invoke(cli, ["sample", "--schema", str(schema_file), "--type", "stadium"])

        assert result.exit_code == 1
        assert "stadium" in result.output

    def test_negative_depth(self, runner, schema_file):
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--type", "team", "--depth", "team=-1",
        ])
        assert result.exit_code == 1

    def test_malformed_limit(self, runner, schema_file):
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--type", "team", "--width", "player",
        ])
        assert result.exit_code == 2

    def test_date_scalar(self, runner, tmp_path):
        schema_file = tmp_path / "events.yaml"
        schema_file.write_text(yaml.safe_dump({
            "scalars": {"Date": {}},
            "objects": {"event": {"fields": {"title": "String", "day": "Date"}}},
        }))
        config_file = tmp_path / "events_config.yaml"
        config_file.write_text(yaml.safe_dump({"scalars": {"Date": {"faker": "date_object"}}}))
        out = tmp_path / "out"

        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--config", str(config_file),
            "--type", "event", "-n", "3", "--output-dir", str(out),
        ])
        assert result.exit_code == 0, result.output
        events, _ = read_fixture(out, "event")
        for event in events:
            date.fromisoformat(event["day"])

        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--config", str(config_file),
            "--type", "event", "--format", "yaml",
        ])
        assert result.exit_code == 0, result.output

    def test_negative_default_list_size(self, runner, schema_file, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml.safe_dump({"default_list_size": -1}))
        result = runner.invoke(cli, [
            "sample", "--schema", str(schema_file), "--config", str(config_file), "--type", "team",
        ])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "default_list_size" in result.output


class TestQueryCommand:
    """Tests for `schema_synth query`."""

    def test_query_envelope(self, runner, schema_file, config_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, [
            "query", "--schema", str(schema_file), "--config", str(config_file),
            "--query", "{ teams { wins players { name } } }",
            "--name", "standings", "-n", "3", "--output-dir", str(out),
        ])

        assert result.exit_code == 0, result.output
        results, run_dir = read_fixture(out, "standings")
        assert len(results) == 3
        for item in results:
            assert list(item) == ["data"]
            for team in item["data"]["teams"]:
                assert set(team) == {"wins", "players"}
                assert all(set(p) == {"name"} for p in team["players"])

        manifest = json.loads((run_dir / "manifest.json").read_text())
        assert manifest["fixtures"]["standings"]["source"] == "{ teams { wins players { name } } }"

    def test_query_file(self, runner, schema_file, tmp_path):
        query_file = tmp_path / "teams.graphql"
        query_file.write_text("query Standings { teams { name } }")
        out = tmp_path / "out"
        result = runner.invoke(cli, [
            "query", "--schema", str(schema_file), "--query-file", str(query_file),
            "--output-dir", str(out),
        ])

        assert result.exit_code == 0, result.output
        results, _ = read_fixture(out, "query")
        assert list(results[0]["data"]) == ["teams"]

    def test_requires_one_query_source(self, runner, schema_file):
        result = runner.invoke(cli, ["query", "--schema", str(schema_file)])
        assert result.exit_code == 2
        assert "--query" in result.output

    def test_unknown_field(self, runner, schema_file):
        result = runner.invoke(cli, [
            "query", "--schema", str(schema_file), "--query", "{ teams { draws } }",
        ])
        assert result.exit_code == 1
        assert "draws" in result.output

    def test_parse_error(self, runner, schema_file):
        result = runner.invoke(cli, [
            "query", "--schema", str(schema_file), "--query", "{ teams { wins ",
        ])
        assert result.exit_code == 1


class TestInfoCommand:
    """Tests for `schema_synth info`."""

    def test_lists_types_and_queries(self, runner, schema_file):
        result = runner.invoke(cli, ["info", "--schema", str(schema_file)])

        assert result.exit_code == 0, result.output
        for name in ("position", "team", "player", "Email", "teams"):
            assert name in result.output


class TestParseLimits:
    """Tests for TYPE=N option parsing."""

    def test_parse(self):
        assert parse_limits(("team=2", " player = 3"), "--depth") == {"team": 2, "player": 3}

    def test_not_an_integer(self):
        with pytest.raises(Exception, match="integer"):
            parse_limits(("team=two",), "--depth")
