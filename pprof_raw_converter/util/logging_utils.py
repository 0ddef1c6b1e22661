import logging

from pprof_raw_converter.util import logging_config
from pprof_raw_converter.util.logging_config import LOG_LEVEL

__DEFAULT_LOGGERS = dict()

formatter = logging.Formatter(
    logging_config.LOGGER_CONTENT_FORMAT,
    logging_config.LOGGER_TIME_FORMAT)


def get_default_logger(module="pprof_raw_converter") -> logging.Logger:
    global __DEFAULT_LOGGERS
    if not __DEFAULT_LOGGERS.get(module):
        __DEFAULT_LOGGERS[module] = get_logger(module)

    return __DEFAULT_LOGGERS.get(module)


def get_logger(module):
    # stderr only; stdout may carry converted output
    logger = logging.getLogger(module)
    if len(logger.handlers) == 0:
        logger.propagate = False
        logger.setLevel(LOG_LEVEL)
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def set_level(level):
    """Applies `level` to every logger handed out so far."""
    for logger in __DEFAULT_LOGGERS.values():
        logger.setLevel(level)
