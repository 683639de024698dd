import io
import logging

from md_i18n.logging_utils import PACKAGE_LOGGER, configure_logging, level_for


def test_level_for_verbosity():
    assert level_for(0) == logging.WARNING
    assert level_for(1) == logging.INFO
    assert level_for(2) == logging.DEBUG
    assert level_for(5) == logging.DEBUG


def test_messages_go_to_the_given_stream():
    stream = io.StringIO()
    configure_logging(0, stream=stream)

    log = logging.getLogger("md_i18n.validation")
    log.info("hidden progress")
    log.warning("docs/zh/a.md is not valid UTF-8")

    assert stream.getvalue() == "md-i18n: WARNING: docs/zh/a.md is not valid UTF-8\n"


def test_debug_output_names_the_logger():
    stream = io.StringIO()
    configure_logging(2, stream=stream)

    logging.getLogger("md_i18n.git_adapter").debug("Running git command: git diff")

    assert stream.getvalue() == "md-i18n: DEBUG md_i18n.git_adapter: Running git command: git diff\n"


def test_reconfiguring_replaces_the_handler():
    first = io.StringIO()
    second = io.StringIO()
    configure_logging(1, stream=first)
    logger = configure_logging(1, stream=second)

    logging.getLogger("md_i18n.plans").info("Wrote plan")

    assert logger.name == PACKAGE_LOGGER
    assert first.getvalue() == ""
    assert second.getvalue() == "md-i18n: INFO: Wrote plan\n"
    assert logger.propagate is False
