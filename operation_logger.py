# operation_logger.py
"""Contains the OperationLogger class for a per-run operation summary."""

import datetime
import logging
import uuid
from typing import Any, Dict

logger = logging.getLogger('vcdelete.oplogger')

SECRET_ARGS = ('password',)


class OperationLogger:
    """
    Tracks one CLI run: assigns its run id, records the sanitized arguments
    and logs a single summary line when the run is finalized.
    """

    def __init__(self, command: str, args_dict: Dict[str, Any]):
        self.run_id = uuid.uuid4().hex[:12]
        self.command = command
        self.args_dict = self._sanitize_args(args_dict)
        self.start_time = datetime.datetime.now(datetime.timezone.utc)
        self.overall_status = "running"
        self.duration_seconds = None
        self._is_finalized = False

    def _sanitize_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """Removes function references and masks secrets."""
        safe_args = {}
        for k, v in args_dict.items():
            if k == 'func' or callable(v):
                continue
            if k in SECRET_ARGS and v:
                safe_args[k] = '********'
            elif isinstance(v, (str, int, float, bool, list, dict, type(None))):
                safe_args[k] = v
            else:
                safe_args[k] = str(v)
        return safe_args

    def log_start(self):
        logger.info(f"Operation '{self.command}' starting with run_id: {self.run_id}")
        logger.debug(f"Arguments: {self.args_dict}")

    def finalize(self, overall_status: str):
        """Records the final status and logs the run summary. Later calls are ignored."""
        if self._is_finalized:
            logger.warning(f"[OpLogger:{self.run_id}] Finalize called more than once. Ignoring subsequent call.")
            return
        end_time = datetime.datetime.now(datetime.timezone.utc)
        self.duration_seconds = round((end_time - self.start_time).total_seconds(), 2)
        self.overall_status = overall_status
        self._is_finalized = True
        logger.info(f"Operation '{self.command}' (run_id: {self.run_id}) finished in "
                    f"{self.duration_seconds:.2f}s. Status: {overall_status}")
