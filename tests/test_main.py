import logging

import pytest

from src.main import MessageInspector, USAGE

MESSAGE = (
    b"Subject: This is a test\r\n"
    b"From: me@mydomain.net\r\n"
    b"To: Team: you@yourdomain.net, them@theirdomain.net;\r\n"
    b"\r\n"
    b"This is the body.\r\n"
    b"Simple."
)


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point logging at tmp_path and put root logging back afterwards"""
    for key in ("MAX_MESSAGE_SIZE", "REQUIRE_FULL_PARSE", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "inspector.log"))

    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def message_file(tmp_path):
    path = tmp_path / "message.eml"
    path.write_bytes(MESSAGE)
    return path


def run(*args):
    return MessageInspector(["main.py", *args]).run()


def test_usage_without_arguments(capsys):
    assert run() == 2
    assert USAGE in capsys.readouterr().out


def test_summary(message_file, tmp_path, capsys):
    assert run(str(message_file), str(tmp_path / "missing.env")) == 0
    out = capsys.readouterr().out
    assert "Subject: This is a test" in out
    assert "From address: me@mydomain.net" in out
    assert "To address: you@yourdomain.net" in out
    assert "To address: them@theirdomain.net" in out
    assert "Body: 26 bytes, 2 line(s)" in out
    assert (tmp_path / "logs" / "inspector.log").exists()


def test_normalize(tmp_path, capsysbinary):
    path = tmp_path / "folded.eml"
    path.write_bytes(b"SUBJECT: folded\r\n line\r\nfrom: a@b.c\r\n")
    assert run(str(path), str(tmp_path / "missing.env"), "--normalize") == 0
    assert capsysbinary.readouterr().out == b"Subject: folded line\r\nFrom: a@b.c\r\n"


def test_parse_failure(tmp_path, capsys):
    path = tmp_path / "broken.eml"
    path.write_bytes(b"From: <broken\r\n\r\nbody")
    assert run(str(path), str(tmp_path / "missing.env")) == 1
    assert "Could not parse" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert run(str(tmp_path / "nope.eml"), str(tmp_path / "missing.env")) == 1
    assert "Cannot read" in capsys.readouterr().out


def test_invalid_configuration(message_file, tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("LOG_FORMAT", "xml")
    assert run(str(message_file), str(tmp_path / "missing.env")) == 2
    assert "Configuration error" in capsys.readouterr().out
