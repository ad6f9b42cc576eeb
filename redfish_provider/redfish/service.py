"""
Redfish service resources.

Thin wrappers over the Redfish JSON documents the provider works with:
the service root, computer systems, managers, ethernet interfaces and boot
options. Every remote call goes through RedfishAdapter.
"""

from typing import Any, Dict, List, Optional

from .adapter import RedfishAdapter
from .enums import PowerState, ResetType
from .errors import ResourceNotFoundError, SystemNotFoundError

SERVICE_ROOT = "/redfish/v1/"


class RedfishResource:
    """Base for a Redfish document fetched from the service."""

    def __init__(self, adapter: RedfishAdapter, data: Dict[str, Any]):
        self.adapter = adapter
        self.data = data

    @property
    def odata_id(self) -> str:
        return self.data.get('@odata.id', '')

    @property
    def id(self) -> str:
        return self.data.get('Id', '')

    def _members(self, collection_path: str, resource_cls, operation_name: str) -> list:
        collection = self.adapter.get(collection_path, operation_name=operation_name)
        members = []
        for member in collection.get('Members', []):
            member_data = self.adapter.get(member['@odata.id'], operation_name=operation_name)
            members.append(resource_cls(self.adapter, member_data))
        return members

    def _link(self, name: str) -> Optional[str]:
        link = self.data.get(name)
        if isinstance(link, dict):
            return link.get('@odata.id')
        return None


class BootOption(RedfishResource):
    """A UEFI boot option of a computer system"""

    @property
    def boot_option_reference(self) -> str:
        return self.data.get('BootOptionReference', '')

    @property
    def boot_option_enabled(self) -> bool:
        return bool(self.data.get('BootOptionEnabled', False))

    def set_enabled(self, enabled: bool) -> Dict[str, Any]:
        return self.adapter.patch(
            self.odata_id,
            {'BootOptionEnabled': enabled},
            operation_name=f'Set Boot Option {self.boot_option_reference}'
        )


class ComputerSystem(RedfishResource):
    """A computer system whose power and boot settings can be changed"""

    @property
    def power_state(self) -> PowerState:
        return PowerState.parse(self.data.get('PowerState'))

    @property
    def boot(self) -> Dict[str, Any]:
        return self.data.get('Boot', {})

    @property
    def boot_order(self) -> List[str]:
        return list(self.boot.get('BootOrder', []))

    def reset(self, reset_type: ResetType) -> Dict[str, Any]:
        """
        Issue a ComputerSystem.Reset action.

        The action target is read from the system's Actions block, falling back
        to the conventional path when the BMC omits it.
        """
        reset_type = ResetType(reset_type)
        action = self.data.get('Actions', {}).get('#ComputerSystem.Reset', {})
        target = action.get('target') or f"{self.odata_id.rstrip('/')}/Actions/ComputerSystem.Reset"
        return self.adapter.post(
            target,
            {'ResetType': reset_type.value},
            operation_name=f'System Reset ({reset_type.value})'
        )

    def set_boot_order(self, boot_order: List[str]) -> Dict[str, Any]:
        return self.adapter.patch(
            self.odata_id,
            {'Boot': {'BootOrder': boot_order}},
            operation_name='Set Boot Order'
        )

    def boot_options(self) -> List[BootOption]:
        path = (self.boot.get('BootOptions') or {}).get('@odata.id')
        if not path:
            return []
        return self._members(path, BootOption, 'Get Boot Options')


class EthernetInterface(RedfishResource):
    """A manager (BMC) network interface"""

    @property
    def dhcpv4(self) -> Dict[str, Any]:
        return self.data.get('DHCPv4', {})

    @property
    def dhcpv6(self) -> Dict[str, Any]:
        return self.data.get('DHCPv6', {})

    @property
    def ipv4_static_addresses(self) -> List[Dict[str, Any]]:
        return list(self.data.get('IPv4StaticAddresses', []))

    def update(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.adapter.patch(self.odata_id, payload, operation_name=f'Update Ethernet Interface {self.id}')


class Manager(RedfishResource):
    """A management controller (BMC)"""

    def ethernet_interfaces(self) -> List[EthernetInterface]:
        path = self._link('EthernetInterfaces')
        if not path:
            return []
        return self._members(path, EthernetInterface, 'Get Ethernet Interfaces')


class RedfishService(RedfishResource):
    """The Redfish service root of one BMC"""

    @property
    def endpoint(self) -> str:
        return self.adapter.endpoint

    @classmethod
    def connect(cls, adapter: RedfishAdapter) -> "RedfishService":
        """Fetch the service root, verifying credentials and reachability."""
        return cls(adapter, adapter.get(SERVICE_ROOT, operation_name='Get Service Root'))

    def systems(self) -> List[ComputerSystem]:
        path = self._link('Systems')
        if not path:
            return []
        return self._members(path, ComputerSystem, 'Get Systems')

    def managers(self) -> List[Manager]:
        path = self._link('Managers')
        if not path:
            return []
        return self._members(path, Manager, 'Get Managers')

    def get_ethernet_interface(self, odata_id: str) -> EthernetInterface:
        return EthernetInterface(self.adapter, self.adapter.get(odata_id, operation_name='Get Ethernet Interface'))


def get_system_resource(service: RedfishService) -> ComputerSystem:
    """
    Resolve the concrete system to act on.

    Raises:
        SystemNotFoundError: If the service reports no systems
    """
    systems = service.systems()
    if not systems:
        raise SystemNotFoundError(service.endpoint)
    return systems[0]


def get_manager(manager_id: str, managers: List[Manager]) -> Manager:
    for manager in managers:
        if manager.id == manager_id:
            return manager
    raise ResourceNotFoundError(f"Manager with ID {manager_id} doesn't exist")


def get_ethernet_interface(ethernet_interface_id: str, interfaces: List[EthernetInterface]) -> EthernetInterface:
    for interface in interfaces:
        if interface.id == ethernet_interface_id:
            return interface
    raise ResourceNotFoundError(f"EthernetInterface with ID {ethernet_interface_id} doesn't exist")
