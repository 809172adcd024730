"""Utilities pertaining to logging."""


from logging import Formatter
import logging
import traceback


# The time of a log message comes first for sorting purposes, and the
# logger name precedes the level name so messages from the image cache
# and the request queue can be told apart.
_MESSAGE_FORMAT = \
    '%(asctime)s,%(msecs)03d %(name)s %(levelname)-8s %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_root_logger(level=logging.INFO, log_file_path=None):

    """
    Configures the root logger to log to the console and, optionally,
    to a file.

    Has no effect if the root logger already has handlers.
    """

    handlers = [logging.StreamHandler()]

    if log_file_path is not None:
        handlers.append(logging.FileHandler(log_file_path))

    formatter = create_formatter()
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers)


def create_formatter():
    return Formatter(fmt=_MESSAGE_FORMAT, datefmt=_DATE_FORMAT)


def append_stack_trace(message):
    return message + ' See stack trace below.\n' + traceback.format_exc()
