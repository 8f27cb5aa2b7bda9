import logging

from pyVmomi import vim

from managers.vcenter import VCenter
from managers.models import ManagedEntityRef, DeleteResult
from managers.exceptions import AmbiguousEntityNameError

logger = logging.getLogger('vcdelete.entity')

STATUS_SUCCESS = "success"
STATUS_NOT_FOUND = "not_found"


class EntityManager(VCenter):

    def __init__(self, vcenter_instance):
        if not vcenter_instance.connection:
            raise ValueError("VCenter instance is not connected.")
        self.vcenter = vcenter_instance
        self.connection = vcenter_instance.connection
        self.task_timeout = vcenter_instance.task_timeout
        self.logger = logger

    def find_entities(self, name, vimtype=vim.ManagedEntity, root=None):
        """Returns a ManagedEntityRef for every entity whose name is exactly ``name``."""
        return [ManagedEntityRef.from_managed_object(obj, name)
                for obj in self.get_entities_by_type(vimtype, root).get(name, [])]

    def find_entity(self, name, vimtype=vim.ManagedEntity, root=None):
        """
        Resolves an inventory name to a single managed entity.

        :param name: Exact, case-sensitive entity name.
        :param vimtype: Restrict the search to this vim type.
        :param root: Container to search under; defaults to the root folder.
        :return: ManagedEntityRef, or None when nothing carries the name.
        :raises AmbiguousEntityNameError: when more than one entity matches.
        """
        matches = self.find_entities(name, vimtype, root)
        if not matches:
            self.logger.warning(f"No managed entity named '{name}' found.")
            return None
        if len(matches) > 1:
            raise AmbiguousEntityNameError(name, matches)
        ref = matches[0]
        self.logger.debug(f"Resolved '{name}' to {ref.type_name} {ref.moid}.")
        return ref

    def delete_entity(self, name, vimtype=vim.ManagedEntity):
        """
        Deletes the managed entity called ``name`` and waits for the destroy task.

        Returns a DeleteResult with status "not_found" without issuing any
        destroy call when the name does not resolve. Task faults raise
        TaskFailedError; pyVmomi faults propagate unchanged.
        """
        ref = self.find_entity(name, vimtype)
        if ref is None:
            return DeleteResult(status=STATUS_NOT_FOUND, name=name)

        self.logger.info(f"Deleting {ref.type_name} '{name}' ({ref.moid}).")
        task = ref.obj.Destroy_Task()
        outcome = self.task_waiter().wait_for_completion(task)
        self.logger.debug(f"{ref.type_name} '{name}' deleted successfully.")
        return DeleteResult(status=STATUS_SUCCESS, name=name, entity=ref, outcome=outcome)
