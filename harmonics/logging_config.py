"""
Logging setup for the 'harmonics' namespace.

The console shows progress at the requested level. A log file, when given, always
records the full DEBUG trace (per-iteration calibration steps, per-mode feature counts)
with the emitting module and line, so a run can be inspected afterwards.
"""
import logging
import sys
from typing import Optional

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the 'harmonics' logger with a console handler and an optional file handler.

    Args:
        level: Console level (e.g. logging.DEBUG for --verbose)
        log_file: Path of a log file receiving every DEBUG record; overwritten on each run

    Returns:
        logging.Logger: The configured 'harmonics' logger
    """
    logger = logging.getLogger("harmonics")
    logger.setLevel(logging.DEBUG if log_file else level)

    # Called once per CLI run; reconfiguring replaces the previous handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.debug(f"Logging to console at {logging.getLevelName(level)}"
                 + (f" and to {log_file} at DEBUG" if log_file else ""))
    return logger
