# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Logging setup for the exifstream command line.

Library modules only create module loggers; handlers are attached here.

Copyright 2025 DNAi inc.
"""

import logging

PACKAGE_LOGGER = "exifstream"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def setup_logging(*, verbose: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        verbose: If True, show DEBUG traces of markers and entries. If False,
            only warnings about values that could not be decoded and above.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logger.propagate = False
    return logger
