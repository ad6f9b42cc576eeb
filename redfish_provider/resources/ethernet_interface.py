"""BMC ethernet interface resource (DHCP and static IPv4 configuration)"""

import threading
from typing import Any, Dict, Optional

from redfish_provider.connectivity import check_server_status
from redfish_provider.credentials import endpoint_key
from redfish_provider.models import (
    DHCPv4Configuration,
    DHCPv6Configuration,
    EthernetInterfaceConfig,
    EthernetInterfaceState,
    IPv4StaticAddress,
)
from redfish_provider.redfish.service import get_ethernet_interface, get_manager
from .base import BaseResource


def build_interface_payload(config: EthernetInterfaceConfig, fields=None) -> Dict[str, Any]:
    """
    Build the PATCH body for the configured blocks.

    Args:
        config: Desired configuration
        fields: Optional subset of dhcpv4/dhcpv6/ipv4_static_addresses to include

    Returns:
        dict: Redfish EthernetInterface properties
    """
    if fields is None:
        fields = ('dhcpv4', 'dhcpv6', 'ipv4_static_addresses')
    payload = {}
    if 'dhcpv4' in fields and config.dhcpv4 is not None:
        payload['DHCPv4'] = config.dhcpv4.to_redfish()
    if 'dhcpv6' in fields and config.dhcpv6 is not None:
        payload['DHCPv6'] = config.dhcpv6.to_redfish()
    if 'ipv4_static_addresses' in fields and config.ipv4_static_addresses is not None:
        payload['IPv4StaticAddresses'] = [address.to_redfish() for address in config.ipv4_static_addresses]
    return payload


def read_interface_state(interface, manager_id: str, ethernet_interface_id: str) -> EthernetInterfaceState:
    return EthernetInterfaceState(
        id=interface.odata_id,
        manager_id=manager_id,
        ethernet_interface_id=ethernet_interface_id,
        dhcpv4=DHCPv4Configuration.from_redfish(interface.dhcpv4),
        dhcpv6=DHCPv6Configuration.from_redfish(interface.dhcpv6),
        ipv4_static_addresses=[IPv4StaticAddress.from_redfish(a) for a in interface.ipv4_static_addresses],
    )


class EthernetInterfaceResource(BaseResource):
    """Configures DHCPv4, DHCPv6 and IPv4 static addresses of a manager's ethernet interface"""

    config_model = EthernetInterfaceConfig

    def _wait_for_bmc(self, config: EthernetInterfaceConfig, cancel_event: Optional[threading.Event]):
        if not config.check_server_status:
            return
        endpoint = endpoint_key(config.redfish_server)
        self.log(f"Waiting for {endpoint} to come back after network change")
        check_server_status(
            endpoint,
            interval=self.settings.server_status_interval,
            timeout=self.settings.server_status_timeout,
            grace_period=self.settings.server_status_grace_period,
            cancel_event=cancel_event
        )

    def create(self, config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        config = self.parse_config(config)
        service = self.provider.connect(config.redfish_server)

        with self.provider.lock_endpoint(config.redfish_server, cancel_event=cancel_event):
            manager = get_manager(config.manager_id, service.managers())
            interface = get_ethernet_interface(config.ethernet_interface_id, manager.ethernet_interfaces())

            payload = build_interface_payload(config)
            if payload:
                self.log(f"Updating ethernet interface {interface.odata_id} on {service.endpoint}")
                interface.update(payload)
                self._wait_for_bmc(config, cancel_event)

            interface = service.get_ethernet_interface(interface.odata_id)
            return self._state(config, interface)

    def update(self, state: Dict[str, Any], config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        config = self.parse_config(config)
        service = self.provider.connect(config.redfish_server)

        current = self.parse_config(state)
        changed = [
            field for field in ('dhcpv4', 'dhcpv6', 'ipv4_static_addresses')
            if build_interface_payload(config, (field,)) != build_interface_payload(current, (field,))
        ]

        with self.provider.lock_endpoint(config.redfish_server, cancel_event=cancel_event):
            interface = service.get_ethernet_interface(state['id'])

            payload = build_interface_payload(config, fields=changed)
            if payload:
                self.log(f"Updating {', '.join(sorted(payload))} of {interface.odata_id} on {service.endpoint}")
                interface.update(payload)
                self._wait_for_bmc(config, cancel_event)

            interface = service.get_ethernet_interface(interface.odata_id)
            return self._state(config, interface)

    def read(self, state: Dict[str, Any]) -> Dict[str, Any]:
        config = self.parse_config(state)
        service = self.provider.connect(config.redfish_server)
        interface = service.get_ethernet_interface(state['id'])
        return self._state(config, interface)

    def _state(self, config: EthernetInterfaceConfig, interface) -> Dict[str, Any]:
        observed = read_interface_state(interface, config.manager_id, config.ethernet_interface_id)
        state = config.model_dump(mode="json")
        state.update(observed.model_dump(mode="json"))
        return state
