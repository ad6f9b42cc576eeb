"""
Redfish Integration Module

Adapter, resource wrappers and error mapping for talking to a BMC's
Redfish service.
"""

from .adapter import RedfishAdapter
from .enums import PowerState, ResetType, DHCPv6OperatingMode
from .errors import (
    RedfishError,
    SystemNotFoundError,
    ResourceNotFoundError,
    PowerOperationError,
    ServerUnreachableError,
    OperationCancelledError,
    map_redfish_error,
)
from .service import (
    RedfishService,
    ComputerSystem,
    Manager,
    EthernetInterface,
    BootOption,
    get_system_resource,
    get_manager,
    get_ethernet_interface,
)

__all__ = [
    "RedfishAdapter",
    "PowerState",
    "ResetType",
    "DHCPv6OperatingMode",
    "RedfishError",
    "SystemNotFoundError",
    "ResourceNotFoundError",
    "PowerOperationError",
    "ServerUnreachableError",
    "OperationCancelledError",
    "map_redfish_error",
    "RedfishService",
    "ComputerSystem",
    "Manager",
    "EthernetInterface",
    "BootOption",
    "get_system_resource",
    "get_manager",
    "get_ethernet_interface",
]
