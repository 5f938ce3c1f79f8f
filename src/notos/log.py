"""Builds the logger that is handed to the rest of the tool."""

import logging
from notos.conf import NotosConf


LOGGER_NAME = 'notos'
TRACE = 5
FORMAT = '%(asctime)s [%(levelname)-5s] %(message)s'

logging.addLevelName(TRACE, 'TRACE')

LEVELS = {
    'trace': TRACE,
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warn': logging.WARNING,
    'error': logging.ERROR,
}


def close_logging(log: logging.Logger) -> None:
    """Detaches and closes every handler on the logger."""
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()


def configure_logging(conf: NotosConf) -> logging.Logger:
    """Returns the ``notos`` logger, set up according to conf.

    When logging is enabled, records at or above ``conf.log_level`` are appended to ``conf.log_file``;
    its directory is created if needed. Otherwise the logger discards everything.
    Any handlers from an earlier call are closed first.

    May raise OSError if the log file can't be opened.
    """
    log = logging.getLogger(LOGGER_NAME)
    close_logging(log)
    log.propagate = False

    if not conf.log_enabled:
        log.addHandler(logging.NullHandler())
        log.setLevel(logging.CRITICAL + 1)
        return log

    parent = conf.log_file.parent
    if not parent.exists():
        parent.mkdir(parents=True)
    handler = logging.FileHandler(str(conf.log_file), mode='a', encoding='utf-8')
    handler.setFormatter(logging.Formatter(FORMAT))
    log.addHandler(handler)
    log.setLevel(LEVELS[conf.log_level])
    return log
