import logging

from werkzeug.serving import WSGIRequestHandler

import run
from groupie import config, logging_config


class FakeConnection:
    def __init__(self):
        self.timeouts = []

    def settimeout(self, value):
        self.timeouts.append(value)


def test_parse_args_overrides_settings(monkeypatch, tmp_path):
    monkeypatch.delenv("GROUPIE_PORT", raising=False)
    args = run.parse_args([
        "--port",
        "5050",
        "--artists",
        str(tmp_path / "seed.json"),
        "--log-level",
        "debug",
        "--log-file",
        str(tmp_path / "server.log"),
        "--debug",
    ])
    settings = run.build_settings(args)
    assert settings.port == 5050
    assert settings.artists_file == tmp_path / "seed.json"
    assert settings.log_level == "DEBUG"
    assert settings.log_file == str(tmp_path / "server.log")
    assert settings.debug is True


def test_unset_arguments_keep_environment(monkeypatch):
    monkeypatch.setenv("GROUPIE_HOST", "0.0.0.0")
    monkeypatch.delenv("GROUPIE_LOG_FILE", raising=False)
    settings = run.build_settings(run.parse_args([]))
    assert settings.host == "0.0.0.0"
    assert settings.translations_file == config.TRANSLATIONS_FILE
    assert settings.log_file is None
    assert settings.debug is False


def test_main_builds_app_and_serves(monkeypatch, tmp_path):
    served = {}
    logging_calls = []

    def fake_run(self, host=None, port=None, debug=None, request_handler=None):
        served.update(
            host=host,
            port=port,
            debug=debug,
            store_size=len(self.extensions["groupie"]["store"]),
            handler=request_handler,
        )

    for name in ("GROUPIE_READ_TIMEOUT", "GROUPIE_WRITE_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(run.env, "load_env", lambda: {})
    monkeypatch.setattr(run, "setup_logging", lambda level, logfile=None: logging_calls.append((level, logfile)))
    monkeypatch.setattr("flask.Flask.run", fake_run)
    exit_code = run.main([
        "--host",
        "127.0.0.1",
        "--port",
        "5051",
        "--artists",
        str(tmp_path / "missing.json"),
        "--translations",
        str(tmp_path / "missing-translations.json"),
        "--log-file",
        str(tmp_path / "server.log"),
    ])
    assert exit_code == 0
    handler = served.pop("handler")
    assert served == {"host": "127.0.0.1", "port": 5051, "debug": False, "store_size": 2}
    assert issubclass(handler, WSGIRequestHandler)
    assert handler.timeout == config.READ_TIMEOUT_SECONDS
    assert handler.write_deadline == config.WRITE_TIMEOUT_SECONDS
    assert [logfile for _, logfile in logging_calls] == [str(tmp_path / "server.log")]


def test_main_reports_bind_failure(monkeypatch, tmp_path):
    def failing_run(self, **options):
        raise OSError("address already in use")

    monkeypatch.setattr(run.env, "load_env", lambda: {})
    monkeypatch.setattr(run, "setup_logging", lambda level, logfile=None: None)
    monkeypatch.setattr("flask.Flask.run", failing_run)
    assert run.main(["--artists", str(tmp_path / "missing.json")]) == 1


def test_request_handler_switches_between_deadlines():
    handler_class = run.build_request_handler(2.0, 7.5)
    handler = handler_class.__new__(handler_class)
    handler.connection = FakeConnection()

    handler.start_write_deadline()
    assert handler.connection.timeouts == [7.5]
    assert handler_class.timeout == 2.0


def test_request_handler_zero_disables_deadline():
    handler_class = run.build_request_handler(0, 0)
    assert handler_class.timeout is None
    assert handler_class.write_deadline is None


def test_setup_logging_adds_file_handler(monkeypatch, tmp_path):
    root = logging.Logger("isolated-root")
    monkeypatch.setattr(logging, "getLogger", lambda name=None: root)
    logfile = tmp_path / "server.log"

    logging_config.setup_logging("debug", str(logfile))
    try:
        assert root.level == logging.DEBUG
        file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
        assert [h.baseFilename for h in file_handlers] == [str(logfile)]
        root.info("written to file")
        for h in root.handlers:
            h.flush()
        assert "written to file" in logfile.read_text(encoding="utf-8")
    finally:
        for h in root.handlers:
            h.close()
