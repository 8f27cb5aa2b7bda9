import logging
import math
import time

from pyVmomi import vmodl

from managers.exceptions import TaskFailedError, TaskWaitTimeoutError
from managers.models import TaskOutcome, TaskState

logger = logging.getLogger('vcdelete.task')

STATE_PATH = "info.state"
ERROR_PATH = "info.error"
RESULT_PATH = "info.result"

# Upper bound for a single WaitForUpdatesEx round trip.
MAX_WAIT_SECONDS_PER_CALL = 60


class PropertyWaiter:
    """
    Blocks until a set of properties on one managed object satisfies a predicate.

    A private property collector and filter are created for each wait and
    destroyed afterwards. All changes in one update set are applied before the
    predicate is evaluated, so it always sees a coherent snapshot.
    """

    def __init__(self, connection):
        self.connection = connection

    def wait_for_values(self, obj, property_paths, is_settled, timeout=None):
        """
        :param obj: The managed object to watch (e.g. a vim.Task).
        :param property_paths: Property paths to subscribe to.
        :param is_settled: Callable taking the current {path: value} snapshot.
        :param timeout: Seconds to wait before raising TaskWaitTimeoutError; None waits forever.
        :return: The snapshot that satisfied ``is_settled``.
        """
        content = self.connection.RetrieveContent()
        collector = content.propertyCollector.CreatePropertyCollector()
        try:
            filter_spec = vmodl.query.PropertyCollector.FilterSpec(
                objectSet=[vmodl.query.PropertyCollector.ObjectSpec(obj=obj, skip=False)],
                propSet=[vmodl.query.PropertyCollector.PropertySpec(
                    type=type(obj), pathSet=list(property_paths), all=False)]
            )
            property_filter = collector.CreateFilter(filter_spec, True)
            try:
                return self._collect(collector, property_paths, is_settled, timeout)
            finally:
                property_filter.Destroy()
        finally:
            collector.DestroyPropertyCollector()

    def _collect(self, collector, property_paths, is_settled, timeout):
        values = {path: None for path in property_paths}
        deadline = None if timeout is None else time.monotonic() + timeout
        version = ""
        while True:
            max_wait = MAX_WAIT_SECONDS_PER_CALL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TaskWaitTimeoutError(timeout, dict(values))
                max_wait = max(1, min(max_wait, int(math.ceil(remaining))))
            options = vmodl.query.PropertyCollector.WaitOptions(maxWaitSeconds=max_wait)

            update_set = collector.WaitForUpdatesEx(version, options)
            if update_set is None:
                continue
            version = update_set.version
            self._apply_updates(update_set, values)
            logger.debug(f"Property snapshot at version {version}: {values}")
            if is_settled(dict(values)):
                return dict(values)

    @staticmethod
    def _apply_updates(update_set, values):
        for filter_update in update_set.filterSet or []:
            for object_update in filter_update.objectSet or []:
                for change in object_update.changeSet or []:
                    if change.name not in values:
                        continue
                    if change.op in ("assign", "add"):
                        values[change.name] = change.val
                    elif change.op in ("remove", "indirectRemove"):
                        values[change.name] = None


class TaskStateTracker:
    """
    State machine over the joint (state, fault) of a task.

    SUCCEEDED settles immediately. ERROR settles only once a fault payload is
    present alongside it. Once a terminal state is recorded it never changes.
    """

    def __init__(self):
        self.state = TaskState.RUNNING
        self.fault = None
        self.result = None

    @property
    def settled(self):
        if self.state is TaskState.SUCCEEDED:
            return True
        return self.state is TaskState.ERROR and self.fault is not None

    def observe(self, values):
        observed = TaskState.from_vim(values.get(STATE_PATH))
        if not self.state.is_terminal:
            self.state = observed
        elif observed is not self.state:
            logger.debug(f"Ignoring state '{observed.value}' after terminal state '{self.state.value}'.")

        if values.get(ERROR_PATH) is not None:
            self.fault = values.get(ERROR_PATH)
        if values.get(RESULT_PATH) is not None:
            self.result = values.get(RESULT_PATH)
        return self.settled

    def outcome(self):
        if not self.settled:
            raise RuntimeError("Task has not reached a settled terminal state.")
        if self.state is TaskState.SUCCEEDED:
            return TaskOutcome(TaskState.SUCCEEDED, result=self.result)
        return TaskOutcome(TaskState.ERROR, fault=self.fault)


class TaskWaiter:
    def __init__(self, connection, timeout=None):
        self.connection = connection
        self.timeout = timeout

    def wait(self, task):
        """Blocks until ``task`` is settled and returns its TaskOutcome; task faults are not raised."""
        tracker = TaskStateTracker()
        PropertyWaiter(self.connection).wait_for_values(
            task, [STATE_PATH, ERROR_PATH, RESULT_PATH], tracker.observe, timeout=self.timeout)
        outcome = tracker.outcome()
        logger.debug(f"Task {getattr(task, '_moId', task)} finished with state '{outcome.state.value}'.")
        return outcome

    def wait_for_completion(self, task):
        """
        Blocks until ``task`` reaches a terminal state.

        :return: The SUCCEEDED TaskOutcome.
        :raises TaskFailedError: when the task ended in the error state.
        """
        outcome = self.wait(task)
        if not outcome.succeeded:
            raise TaskFailedError(outcome.fault, outcome.fault_message, task=task)
        return outcome
