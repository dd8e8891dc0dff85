import logging

from app.logging_config import NO_REQUEST_ID, SafeRequestIDFormatter, build_logging_config
from app.utils.logger import clear_request_context, get_logger, set_request_context


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def make_logger(name):
    logger = get_logger(name)
    handler = CollectingHandler()
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    logger.logger.propagate = False
    return logger, handler


def test_records_carry_context_request_id():
    logger, handler = make_logger("tests.logging.context")
    set_request_context("req-1")
    try:
        logger.info("streak advanced")
    finally:
        clear_request_context()
    logger.info("outside a request")

    assert handler.records[0].request_id == "req-1"
    assert not hasattr(handler.records[1], "request_id")


def test_explicit_request_id_wins():
    logger, handler = make_logger("tests.logging.explicit")
    set_request_context("req-1")
    try:
        logger.warning("sweep", request_id="sweep-42")
    finally:
        clear_request_context()
    assert handler.records[0].request_id == "sweep-42"


def test_formatter_fills_missing_request_id():
    formatter = SafeRequestIDFormatter("[%(request_id)s] %(message)s")
    record = logging.LogRecord("app", logging.INFO, __file__, 1, "hello", None, None)
    assert formatter.format(record) == f"[{NO_REQUEST_ID}] hello"


def test_level_override_applies_to_app_logger():
    config = build_logging_config("debug")
    assert config["loggers"]["app"]["level"] == "DEBUG"
    assert config["loggers"]["app.reset_streaks"]["handlers"] == ["sweep_console"]
