"""Unit tests for the group_events command-line entry."""

import json
from pathlib import Path

import pytest

from group_events.__main__ import EXIT_MACRO_ERROR, main
from group_events.events_logging import configure_events_logging, get_logging_status

pytestmark = pytest.mark.unit


@pytest.fixture
def events_file(tmp_path: Path) -> Path:
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": 1,
                    "title": "Journal club",
                    "publish_up": "2025-04-02 17:00:00",
                    "publish_down": "2025-04-02 18:00:00",
                    "scope_id": 1042,
                    "link": "/groups/physics/calendar/details/1",
                }
            ]
        )
    )
    return path


class TestMain:
    def test_renders_json(self, events_file, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("GROUP_EVENTS_TIMEZONE", "UTC")
        argv = [str(events_file), "from=2025-04-01", "for=1 week", "--group", "1042"]

        with pytest.raises(SystemExit) as exc_info:
            main(argv + ["--env-file", str(tmp_path / ".env")])

        assert exc_info.value.code == 0
        output = json.loads(capsys.readouterr().out)
        event = output["groups"][0]["events"][0]
        assert event["title"] == "Journal club"
        assert event["start"] == "5:00 PM"
        assert event["end"] == "6:00 PM UTC"

    def test_empty_result_includes_add_event_path(self, events_file, tmp_path, capsys):
        argv = [str(events_file), "from=2030-01-01", "--group", "1042", "--group-cn", "physics"]

        with pytest.raises(SystemExit):
            main(argv + ["--env-file", str(tmp_path / ".env")])

        output = json.loads(capsys.readouterr().out)
        assert output["groups"] == []
        assert output["add_event_path"].endswith("cn=physics&active=calendar&action=add")

    def test_macro_error_exit_code(self, events_file, tmp_path, capsys):
        argv = [str(events_file), "for=5 bananas", "--group", "1042"]

        with pytest.raises(SystemExit) as exc_info:
            main(argv + ["--env-file", str(tmp_path / ".env")])

        assert exc_info.value.code == EXIT_MACRO_ERROR
        assert "5 bananas" in capsys.readouterr().err

    def test_missing_group_is_unsupported(self, events_file, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([str(events_file), "--env-file", str(tmp_path / ".env")])

        assert exc_info.value.code == EXIT_MACRO_ERROR
        assert "designed for Groups only" in capsys.readouterr().err

    def test_describe(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--describe"])

        assert exc_info.value.code == 0
        assert "Displays group events" in capsys.readouterr().out

    def test_quiet_logging_without_debug(self, events_file, tmp_path, capsys):
        argv = [str(events_file), "from=2025-04-01", "--group", "1042"]

        with pytest.raises(SystemExit):
            main(argv + ["--env-file", str(tmp_path / ".env")])

        assert get_logging_status()["group_events"] == "WARNING"
        assert "Production logging" not in capsys.readouterr().err
        configure_events_logging(force_debug=False)
