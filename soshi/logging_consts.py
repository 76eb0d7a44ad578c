import logging

LOGGING_DATETIME_FORMAT_STRING = "%Y-%m-%d %H:%M:%S"
LOGGING_DEFAULT_LOG_LEVEL = logging.INFO
LOGGING_LOG_FORMAT_STRING = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
