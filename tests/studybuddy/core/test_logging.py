import logging

from studybuddy.core.logging import setup_logging


def test_setup_logging_string_levels():
    setup_logging("ERROR")
    root = logging.getLogger()
    assert root.getEffectiveLevel() == logging.ERROR
    assert len(root.handlers) >= 1

    setup_logging("warn")
    assert logging.getLogger().getEffectiveLevel() == logging.WARNING

    setup_logging("nonsense")
    assert logging.getLogger().getEffectiveLevel() == logging.INFO


def test_setup_logging_numeric():
    setup_logging(10)
    assert logging.getLogger().getEffectiveLevel() == logging.DEBUG
    setup_logging("30")
    assert logging.getLogger().getEffectiveLevel() == logging.WARNING


def test_setup_logging_from_env(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("STUDYBUDDY_LOG_LEVEL", "WARNING")
    setup_logging(None)
    assert logging.getLogger().getEffectiveLevel() == logging.WARNING
