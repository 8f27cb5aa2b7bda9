"""Exceptions raised by the vcdelete managers.

Faults coming from pyVmomi itself (``vmodl.MethodFault`` subclasses, socket and
SSL errors) are not wrapped; they reach the caller unchanged.
"""


class VcDeleteError(Exception):
    """Base class for errors raised by vcdelete."""


class TaskFailedError(VcDeleteError):
    """A server task finished in the error state."""

    def __init__(self, fault, message=None, task=None):
        self.fault = fault
        self.task = task
        self.message = message or (str(fault) if fault is not None else "Task failed without a fault description.")
        super().__init__(self.message)


class TaskWaitTimeoutError(VcDeleteError):
    """The caller-imposed wait limit elapsed before the task reached a terminal state."""

    def __init__(self, timeout, last_values=None):
        self.timeout = timeout
        self.last_values = last_values or {}
        super().__init__(f"Task did not reach a terminal state within {timeout} seconds.")


class AmbiguousEntityNameError(VcDeleteError):
    """More than one managed entity carries the requested name."""

    def __init__(self, name, candidates):
        self.name = name
        self.candidates = list(candidates)
        types = ", ".join(sorted({c.type_name for c in self.candidates}))
        super().__init__(
            f"Name '{name}' matches {len(self.candidates)} managed entities ({types}). "
            "Narrow the search with --type."
        )
