import io
import json
import logging

import pytest

from roomchain import cli
from roomchain import config as config_mod
from roomchain.logging_config import configure_logging


@pytest.fixture(autouse=True)
def quiet(monkeypatch, tmp_path):
    # Leave pytest's log capture in place
    monkeypatch.setattr(cli, "configure_logging", lambda level=None, stream=None: None)
    for var in list(config_mod.ENV_FIELDS) + [config_mod.CONFIG_ENV]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config_mod, "user_config_dir", lambda appname=None: str(tmp_path / "user"))


SMALL = ["--columns", "20", "--rows", "20", "--rooms", "3", "--corridor-min", "3", "--corridor-max", "5"]


def test_json_output(capsys):
    assert cli.main(SMALL + ["--seed", "1"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["columns"] == 20
    assert len(data["rooms"]) == 3
    assert len(data["corridors"]) == 2
    assert data["attempts"] >= 1


def test_same_seed_prints_same_layout(capsys):
    cli.main(SMALL + ["--seed", "99"])
    first = capsys.readouterr().out
    cli.main(SMALL + ["--seed", "99"])
    assert capsys.readouterr().out == first


def test_ascii_output(capsys):
    assert cli.main(SMALL + ["--seed", "2", "--format", "ascii"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 20
    assert all(len(line) == 20 for line in lines)
    assert sum(line.count("#") for line in lines) > 0
    assert sum(line.count("+") for line in lines) > 0


def test_impossible_board_exits_1(capsys, caplog):
    rc = cli.main(["--columns", "8", "--rows", "8", "--rooms", "3", "--max-attempts", "5", "--seed", "1"])
    assert rc == 1
    assert capsys.readouterr().out == ""
    assert "corridor_no_room=5" in caplog.text


def test_bad_configuration_exits_2(capsys):
    assert cli.main(["--corridor-min", "9", "--corridor-max", "3"]) == 2
    assert capsys.readouterr().out == ""


def test_missing_templates_file_exits_2(tmp_path):
    assert cli.main(SMALL + ["--templates", str(tmp_path / "missing.yaml")]) == 2


def test_non_integer_config_value_exits_2(tmp_path, capsys):
    path = tmp_path / "cfg.yaml"
    path.write_text("columns: wide\n", encoding="utf-8")
    assert cli.main(["--config", str(path)]) == 2
    assert capsys.readouterr().out == ""


def test_templates_file(tmp_path, capsys):
    path = tmp_path / "t.yaml"
    path.write_text(
        "start: {name: entrance, width: 5, height: 5}\n"
        "templates:\n  - {name: cell, width: 4, height: 4, multiplicity: 3}\n",
        encoding="utf-8",
    )
    assert cli.main(["--columns", "40", "--rows", "40", "--rooms", "3", "--templates", str(path), "--seed", "4"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [r["template"] for r in data["rooms"]] == ["entrance", "cell", "cell"]


def test_configure_logging_installs_single_handler(monkeypatch):
    monkeypatch.delenv("ROOMCHAIN_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    stream = io.StringIO()
    try:
        configure_logging(logging.INFO, stream=stream)
        configure_logging(logging.INFO, stream=stream)
        assert len(root.handlers) == 1
        logging.getLogger("roomchain.demo").info("placed %d rooms", 3)
        logging.getLogger("roomchain.demo").debug("hidden")
        out = stream.getvalue()
        assert "INFO     | roomchain.demo: placed 3 rooms" in out
        assert "hidden" not in out
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
