"""Read-only ethernet interface data sources"""

from typing import Any, Dict, List

from redfish_provider.models import EthernetInterfaceSummary
from redfish_provider.redfish.errors import ResourceNotFoundError
from redfish_provider.redfish.service import get_ethernet_interface, get_manager
from redfish_provider.utils import unix_timestamp_id
from .base import BaseResource
from .ethernet_interface import read_interface_state


class EthernetInterfacesDataSource(BaseResource):
    """Lists the ethernet interfaces of the server's manager"""

    def read(self, redfish_server: List) -> Dict[str, Any]:
        service = self.provider.connect(redfish_server)

        # One server per provider block, so one manager is expected
        managers = service.managers()
        if not managers:
            raise ResourceNotFoundError(f"No managers found on {service.endpoint}")

        interfaces = []
        for interface in managers[0].ethernet_interfaces():
            self.log(f"Adding {interface.odata_id} - {interface.id}", "DEBUG")
            interfaces.append(EthernetInterfaceSummary(odata_id=interface.odata_id, id=interface.id))

        return {
            'id': unix_timestamp_id(),
            'ethernet_interfaces': [interface.model_dump() for interface in interfaces],
        }


class EthernetInterfaceDataSource(BaseResource):
    """Reads the configuration of one ethernet interface"""

    def read(self, redfish_server: List, manager_id: str = "1", ethernet_interface_id: str = "1") -> Dict[str, Any]:
        service = self.provider.connect(redfish_server)
        manager = get_manager(manager_id, service.managers())
        interface = get_ethernet_interface(ethernet_interface_id, manager.ethernet_interfaces())
        return read_interface_state(interface, manager_id, ethernet_interface_id).model_dump(mode="json")
