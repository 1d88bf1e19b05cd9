from loguru import logger

from murmur import logging_utils


def test_configure_logging_tracks_active_profile(monkeypatch, capsys) -> None:
    monkeypatch.setattr(logging_utils, "_CONFIGURED_PROFILE", None)

    logging_utils.configure_logging(profile="default", level="DEBUG")
    assert logging_utils._CONFIGURED_PROFILE == "default"
    logger.debug("logging.test.default")
    assert "logging.test.default" in capsys.readouterr().err

    logging_utils.configure_logging(profile="chat")
    assert logging_utils._CONFIGURED_PROFILE == "chat"
    logger.info("logging.test.hidden")
    assert "logging.test.hidden" not in capsys.readouterr().out
