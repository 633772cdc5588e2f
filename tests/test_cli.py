from __future__ import annotations

import json

import pytest

from conftest import module_yaml
from trellis import cli


@pytest.fixture
def project(make_project, monkeypatch):
    root = make_project({
        "api/trellis.yml": module_yaml("api", services={"web": {"port": 80}}),
        "img/trellis.yml": module_yaml("img", type="container", extra="image: nginx"),
    })
    monkeypatch.setenv("TRELLIS_PROJECT_ROOT", str(root))
    return root


def test_modules_command(project, capsys):
    cli.main(["modules"])
    out = capsys.readouterr().out
    assert "api" in out and "img" in out and "container" in out


def test_services_command(project, capsys):
    cli.main(["services"])
    assert "(module api)" in capsys.readouterr().out


def test_plugins_command(project, capsys):
    cli.main(["plugins", "container"])
    out = capsys.readouterr().out
    assert "container" in out and "parse_module" in out
    assert "npm-package" not in out


def test_env_command(project, capsys):
    cli.main(["env", "local.team"])
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"name": "local", "namespace": "team", "providers": ["generic", "container"]}


def test_errors_are_reported_as_json(project, capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["env", "nowhere"])
    assert exc_info.value.code == 1
    payload = json.loads(capsys.readouterr().err)
    assert payload["type"] == "parameter"
    assert payload["detail"]["name"] == "nowhere"


def test_unknown_command(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["launch"])
    assert exc_info.value.code == 1
    assert "Unknown command: launch" in capsys.readouterr().out


def test_configure_logging_installs_one_handler(monkeypatch):
    import logging

    from trellis.log import configure_logging

    monkeypatch.setenv("TRELLIS_LOG_LEVEL", "debug")
    logger = configure_logging()
    handlers = list(logger.handlers)
    configure_logging()

    assert logger.level == logging.DEBUG
    assert logger.handlers == handlers
    assert configure_logging("error").level == logging.ERROR
