import logging

from appmodel import setup_logging


def test_setup_logging_configures_namespace(tmp_path):
    log_file = tmp_path / "model.log"

    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    logging.getLogger("appmodel.model.model").debug("hello from the model")
    for handler in logger.handlers:
        handler.flush()

    assert logger.name == "appmodel"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    assert "hello from the model" in log_file.read_text(encoding="utf-8")

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


def test_setup_logging_twice_does_not_duplicate_handlers():
    setup_logging()
    logger = setup_logging()

    assert len(logger.handlers) == 1
    logger.handlers.clear()
