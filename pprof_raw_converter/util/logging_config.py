import logging
import os

LOGGER_LEVEL_ENV = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR
}

LOG_LEVEL = LOGGER_LEVEL_ENV.get(os.getenv("PPROF_RAW_LOG_LEVEL", "INFO").upper(), logging.INFO)

LOGGER_CONTENT_FORMAT = "%(asctime)s.%(msecs)03d[%(levelname)s][%(module)s:%(lineno)d] %(message)s"

LOGGER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
