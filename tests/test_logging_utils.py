from __future__ import annotations

import logging

from exifstream.logging_utils import LOG_FORMAT, setup_logging


def test_setup_logging_default():
    logger = setup_logging()
    assert isinstance(logger, logging.Logger)
    assert logger.name == "exifstream"
    assert not logger.propagate
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING


def test_setup_logging_verbose():
    logger = setup_logging(verbose=True)
    assert logger.handlers[0].level == logging.DEBUG
    assert logger.handlers[0].formatter._fmt == LOG_FORMAT


def test_setup_logging_is_idempotent():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_module_loggers_are_children():
    setup_logging()
    child = logging.getLogger("exifstream.ifd_decoder")
    assert child.parent is logging.getLogger("exifstream")
