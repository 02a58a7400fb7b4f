import logging

from app.core.logger import logger, setup_logging


def test_stdlib_records_reach_loguru(tmp_path):
    setup_logging(level="DEBUG", error_log=str(tmp_path / "errors.log"))
    captured = []
    sink_id = logger.add(captured.append, level="DEBUG", format="{level}|{message}")
    try:
        logging.getLogger("some.library").warning("pool exhausted")
        logging.getLogger("httpx").info("HTTP Request: GET /rest/v1/services")
    finally:
        logger.remove(sink_id)

    messages = [str(m).strip() for m in captured]
    assert "WARNING|pool exhausted" in messages
    # httpx is raised to WARNING, its INFO request lines are dropped
    assert not any("HTTP Request" in m for m in messages)


def test_errors_are_written_to_file(tmp_path):
    error_log = tmp_path / "errors.log"
    setup_logging(error_log=str(error_log))

    logger.info("booking stored")
    logger.error("payment insert failed")
    logger.complete()

    content = error_log.read_text()
    assert "payment insert failed" in content
    assert "booking stored" not in content
