"""Test log level filtering, especially spew level."""

import pytest

from gitpromote.core.log import ConsoleSink, FileSink, OTLPSink, setup_logger

pytestmark = pytest.mark.usefixtures("reset_logger")

MESSAGES = ("spew", "trace", "debug", "info", "warn", "error")


def _write_all(logger):
    logger.spew("SPEW message")
    logger.trace("TRACE message")
    logger.debug("DEBUG message")
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.error("ERROR message")


@pytest.mark.parametrize("level", MESSAGES)
def test_file_sink_keeps_level_and_above(tmp_path, level):
    log_file = tmp_path / f"{level}.log"

    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        otlp=OTLPSink(enabled=False),
        file=FileSink(enabled=True, level=level, path=str(log_file)),
    )
    _write_all(logger)
    logger.close()

    content = log_file.read_text()
    cutoff = MESSAGES.index(level)
    for i, name in enumerate(MESSAGES):
        present = f"{name.upper()} message" in content
        assert present == (i >= cutoff), name


def test_sink_inherits_logger_level(tmp_path):
    log_file = tmp_path / "inherit.log"

    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        otlp=OTLPSink(enabled=False),
        file=FileSink(enabled=True, path=str(log_file)),
        level="warn",
    )
    logger.info("INFO message")
    logger.warn("WARN message")
    logger.close()

    content = log_file.read_text()
    assert "INFO message" not in content
    assert "WARN message" in content


def test_keyword_arguments_are_rendered(tmp_path):
    log_file = tmp_path / "extras.log"

    logger = setup_logger(
        log_root=tmp_path,
        run_name="test",
        console=ConsoleSink(enabled=False),
        otlp=OTLPSink(enabled=False),
        file=FileSink(enabled=True, level="info", path=str(log_file)),
    )
    logger.info("Step", number=3, title="Switch to test")
    logger.close()

    line = log_file.read_text().strip().splitlines()[-1]
    assert "info  Step" in line
    assert "number=3" in line
    assert "title='Switch to test'" in line


def test_file_path_template_uses_run_name(tmp_path):
    logger = setup_logger(
        log_root=tmp_path,
        run_name="promote",
        console=ConsoleSink(enabled=False),
        otlp=OTLPSink(enabled=False),
        file=FileSink(enabled=True, level="info"),
    )
    logger.info("hello")
    logger.close()

    assert (tmp_path / "promote" / "gitpromote.log").is_file()
