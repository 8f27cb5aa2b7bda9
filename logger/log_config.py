# logger/log_config.py

import logging
import sys

ROOT_LOGGER = 'vcdelete'

SUB_LOGGERS = [
    'vcdelete.vcenter', 'vcdelete.entity', 'vcdelete.task',
    'vcdelete.oplogger',
]

LOG_FORMAT = '%(asctime)s - %(name)s [%(levelname)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class RunIdFilter(logging.Filter):
    """Stamps every record with the run id of the current operation."""

    def __init__(self, run_id):
        super().__init__()
        self.run_id = run_id

    def filter(self, record):
        record.run_id = self.run_id
        return True


def setup_logger(run_id=None, verbose=False, stream=None):
    """
    Configures the main 'vcdelete' logger.

    Should be called ONCE per run. Other modules use their own
    'vcdelete.*' logger, which propagates here.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    fmt = LOG_FORMAT
    if run_id:
        fmt = '%(asctime)s - %(name)s [%(levelname)s] [%(run_id)s] %(message)s'
    formatter = logging.Formatter(fmt, datefmt=DATE_FORMAT)

    # Prevents duplicate output if called more than once.
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler(stream or sys.stdout)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    if run_id:
        stream_handler.addFilter(RunIdFilter(run_id))
    logger.addHandler(stream_handler)

    logger.propagate = False

    for name in SUB_LOGGERS:
        sub_logger = logging.getLogger(name)
        sub_logger.setLevel(level)
        sub_logger.propagate = True
        for h in list(sub_logger.handlers):
            sub_logger.removeHandler(h)

    return logger
