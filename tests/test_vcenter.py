"""Tests for the VCenter connection wrapper."""

from unittest.mock import MagicMock, patch

import pytest
from pyVmomi import vim

from conftest import FakeInventory, make_entity
from managers.vcenter import VCenter


class TestGetEntitiesByType:
    """Tests for the name -> object inventory map."""

    def test_maps_names_to_objects(self, vcenter, test_folder) -> None:
        entities = vcenter.get_entities_by_type()

        assert entities["testFolder"] == [test_folder]
        assert set(entities) == {"Datacenters", "lab-dc", "testFolder", "web-01", "cluster-a"}

    def test_follows_paging_tokens(self) -> None:
        named = [(f"vm-{i}", make_entity(f"vm-{i}", "VirtualMachine")) for i in range(5)]
        inventory = FakeInventory(named, page_size=2)
        vc = VCenter("vc01", "user", "pass")
        vc.connection = inventory.service_instance

        entities = vc.get_entities_by_type(vim.VirtualMachine)

        assert len(entities) == 5
        assert inventory.property_collector.continue_tokens == ["1", "2"]

    def test_duplicate_names_are_all_kept(self) -> None:
        first, second = make_entity("group-v1", "Folder"), make_entity("vm-9", "VirtualMachine")
        inventory = FakeInventory([("dup", first), ("dup", second)])
        vc = VCenter("vc01", "user", "pass")
        vc.connection = inventory.service_instance

        assert vc.get_entities_by_type()["dup"] == [first, second]

    def test_container_view_destroyed(self, vcenter, inventory) -> None:
        vcenter.get_entities_by_type()

        inventory.container.Destroy.assert_called_once()

    def test_container_view_destroyed_on_error(self, vcenter, inventory) -> None:
        inventory.property_collector.pages = []

        with pytest.raises(IndexError):
            vcenter.get_entities_by_type()

        inventory.container.Destroy.assert_called_once()


class TestConnect:
    """Tests for connection handling."""

    def test_successful_connect_registers_disconnect(self) -> None:
        service_instance = MagicMock()
        with patch("managers.vcenter.SmartConnect", return_value=service_instance) as smart_connect, \
                patch("managers.vcenter.atexit.register") as register:
            vc = VCenter("vc01", "user", "pass", port=8443)
            vc.connect()

        assert vc.connection is service_instance
        assert smart_connect.call_args.kwargs["port"] == 8443
        assert smart_connect.call_args.kwargs["sslContext"] is None
        register.assert_called_once()

    def test_disable_ssl_verification_passes_context(self) -> None:
        with patch("managers.vcenter.SmartConnect", return_value=MagicMock()) as smart_connect, \
                patch("managers.vcenter.atexit.register"):
            VCenter("vc01", "user", "pass", disable_ssl_verification=True).connect()

        context = smart_connect.call_args.kwargs["sslContext"]
        assert context is not None
        assert context.check_hostname is False

    def test_invalid_login_leaves_disconnected(self) -> None:
        with patch("managers.vcenter.SmartConnect", side_effect=vim.fault.InvalidLogin(msg="bad login")):
            vc = VCenter("vc01", "user", "wrong")
            vc.connect()

        assert vc.connection is None
        assert vc.is_connected() is False

    def test_refused_connection_leaves_disconnected(self) -> None:
        with patch("managers.vcenter.SmartConnect", side_effect=ConnectionRefusedError("refused")):
            vc = VCenter("vc01", "user", "pass")
            vc.connect()

        assert vc.connection is None
