"""Pytest fixtures for vcdelete tests.

The fakes stand in for a pyVmomi service instance: a root property collector
that pages inventory names, and a private collector that replays task update
sets.
"""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from pyVmomi import vmodl

from managers.vcenter import VCenter


def make_entity(moid, wsdl_name, task=None):
    entity = MagicMock(name=f"{wsdl_name}:{moid}")
    entity._moId = moid
    entity._wsdlName = wsdl_name
    entity.Destroy_Task.return_value = task if task is not None else make_task()
    return entity


def make_task(moid="task-101"):
    task = MagicMock(name=f"Task:{moid}")
    task._moId = moid
    return task


def object_content(obj, name):
    return SimpleNamespace(obj=obj, propSet=[SimpleNamespace(name="name", val=name)])


def change(name, val, op="assign"):
    return SimpleNamespace(name=name, op=op, val=val)


def update_set(version, *changes):
    return SimpleNamespace(
        version=version,
        filterSet=[SimpleNamespace(objectSet=[SimpleNamespace(changeSet=list(changes))])],
    )


class FakeFault:
    """Mimics the localized fault payload attached to a failed task."""

    def __init__(self, message):
        self.localizedMessage = message

    def __str__(self):
        return self.localizedMessage


class FakeTaskCollector:
    """Private collector returned by CreatePropertyCollector; replays update sets in order."""

    def __init__(self, updates=None):
        self.updates = list(updates or [])
        self.filters = []
        self.filter_specs = []
        self.versions = []
        self.destroyed = False

    def CreateFilter(self, spec, partialUpdates):
        self.filter_specs.append(spec)
        property_filter = MagicMock(name="PropertyFilter")
        self.filters.append(property_filter)
        return property_filter

    def WaitForUpdatesEx(self, version, options):
        self.versions.append(version)
        if not self.updates:
            raise AssertionError("WaitForUpdatesEx called after the last scripted update")
        update = self.updates.pop(0)
        if isinstance(update, BaseException):
            raise update
        return update

    def DestroyPropertyCollector(self):
        self.destroyed = True


class FakePropertyCollector:
    """Root property collector serving inventory pages."""

    def __init__(self, pages, task_collector):
        self.pages = pages
        self.task_collector = task_collector
        self.retrieve_calls = 0
        self.continue_tokens = []

    def RetrievePropertiesEx(self, specSet, options):
        self.retrieve_calls += 1
        return self.pages[0]

    def ContinueRetrievePropertiesEx(self, token):
        self.continue_tokens.append(token)
        return self.pages[int(token)]

    def CreatePropertyCollector(self):
        return self.task_collector


class FakeInventory:
    """Builds a fake service instance from (name, entity) pairs."""

    def __init__(self, entities=(), page_size=None, task_updates=None):
        self.entities = list(entities)
        self.container = MagicMock(name="ContainerView")
        self.task_collector = FakeTaskCollector(task_updates)
        contents = [object_content(obj, name) for name, obj in self.entities]
        self.property_collector = FakePropertyCollector(self._paginate(contents, page_size),
                                                        self.task_collector)
        self.content = MagicMock(name="ServiceContent")
        self.content.propertyCollector = self.property_collector
        self.content.viewManager.CreateContainerView.return_value = self.container
        self.service_instance = MagicMock(name="ServiceInstance")
        self.service_instance.RetrieveContent.return_value = self.content
        self.service_instance.content = self.content

    @staticmethod
    def _paginate(contents, page_size):
        if not page_size:
            return [SimpleNamespace(objects=contents, token=None)]
        chunks = [contents[i:i + page_size] for i in range(0, len(contents), page_size)] or [[]]
        pages = []
        for index, chunk in enumerate(chunks):
            token = str(index + 1) if index + 1 < len(chunks) else None
            pages.append(SimpleNamespace(objects=chunk, token=token))
        return pages

    def script_task(self, *updates):
        self.task_collector.updates.extend(updates)


@pytest.fixture(autouse=True)
def fake_vmodl():
    """Replaces the vmodl spec constructors, which type-check their fields against real managed objects."""
    fake = MagicMock(name="vmodl")
    fake.MethodFault = vmodl.MethodFault
    with patch("managers.vcenter.vmodl", fake), patch("managers.task_waiter.vmodl", fake):
        yield fake


@pytest.fixture
def succeeded_updates():
    return [
        update_set("1", change("info.state", "queued")),
        update_set("2", change("info.state", "running")),
        update_set("3", change("info.state", "success")),
    ]


@pytest.fixture
def test_folder():
    return make_entity("group-v22", "Folder")


@pytest.fixture
def inventory(test_folder):
    return FakeInventory([
        ("Datacenters", make_entity("group-d1", "Folder")),
        ("lab-dc", make_entity("datacenter-2", "Datacenter")),
        ("testFolder", test_folder),
        ("web-01", make_entity("vm-1043", "VirtualMachine")),
        ("cluster-a", make_entity("domain-c7", "ClusterComputeResource")),
    ])


@pytest.fixture
def vcenter(inventory):
    vc = VCenter("vc01.lab.local", "administrator@vsphere.local", "secret")
    vc.connection = inventory.service_instance
    return vc


@pytest.fixture(autouse=True)
def reset_vcdelete_logger():
    """Drops handlers bound to a captured stream once the test is over."""
    yield
    logger = logging.getLogger("vcdelete")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
