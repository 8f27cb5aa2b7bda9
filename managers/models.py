from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


@dataclass(frozen=True)
class ManagedEntityRef:
    """
    Reference to an inventory object issued by the server.

    Attributes:
        moid (str): The managed object id (e.g. "group-v22", "vm-1043").
        type_name (str): The vSphere type tag (e.g. "Folder", "VirtualMachine").
        name (str): The inventory name the entity was resolved from.
        obj: The live pyVmomi managed object; not part of equality.
    """
    moid: str
    type_name: str
    name: str
    obj: Any = field(default=None, compare=False, repr=False)

    @classmethod
    def from_managed_object(cls, obj, name):
        return cls(moid=obj._moId, type_name=obj._wsdlName, name=name, obj=obj)


class TaskState(Enum):
    RUNNING = "running"
    SUCCEEDED = "success"
    ERROR = "error"

    @property
    def is_terminal(self):
        return self is not TaskState.RUNNING

    @classmethod
    def from_vim(cls, value):
        """Maps a vim.TaskInfo.State value; queued, running and unset all count as RUNNING."""
        if value == "success":
            return cls.SUCCEEDED
        if value == "error":
            return cls.ERROR
        return cls.RUNNING


@dataclass(frozen=True)
class TaskOutcome:
    """Terminal result of a server task: SUCCEEDED, or ERROR with its fault payload."""
    state: TaskState
    fault: Any = None
    result: Any = None

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.SUCCEEDED

    @property
    def fault_message(self) -> Optional[str]:
        return describe_fault(self.fault)


def describe_fault(fault) -> Optional[str]:
    """Returns the localized description carried by a task fault, if any."""
    if fault is None:
        return None
    for attr in ("localizedMessage", "msg"):
        message = getattr(fault, attr, None)
        if message:
            return message
    inner = getattr(fault, "fault", None)
    if inner is not None and inner is not fault:
        return describe_fault(inner)
    return str(fault) or type(fault).__name__


@dataclass(frozen=True)
class DeleteResult:
    status: str
    name: str
    entity: Optional[ManagedEntityRef] = None
    outcome: Optional[TaskOutcome] = None
