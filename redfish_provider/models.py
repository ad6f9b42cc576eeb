"""
Pydantic models for resource and data source configuration.
"""

import re
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List

from redfish_provider.redfish.enums import DHCPv6OperatingMode, PowerState, ResetType

IPV4_PATTERN = r"^(?:[0-9]{1,3}\.){3}[0-9]{1,3}$"


class RedfishServer(BaseModel):
    """Server BMC and its user credentials (one redfish_server block)."""
    endpoint: str  # Server BMC IP address or hostname, e.g. https://10.0.0.5
    user: Optional[str] = None
    password: Optional[str] = None
    ssl_insecure: Optional[bool] = None


class BootOption(BaseModel):
    """Desired enablement of one UEFI boot option."""
    boot_option_reference: str
    boot_option_enabled: bool


class DHCPv4Configuration(BaseModel):
    dhcp_enabled: bool = False
    use_dns_servers: bool = False
    use_domain_name: bool = False
    use_gateway: bool = False
    use_ntp_servers: bool = False
    use_static_routes: bool = False

    def to_redfish(self) -> dict:
        return {
            "DHCPEnabled": self.dhcp_enabled,
            "UseDNSServers": self.use_dns_servers,
            "UseDomainName": self.use_domain_name,
            "UseGateway": self.use_gateway,
            "UseNTPServers": self.use_ntp_servers,
            "UseStaticRoutes": self.use_static_routes,
        }

    @classmethod
    def from_redfish(cls, data: dict) -> "DHCPv4Configuration":
        return cls(
            dhcp_enabled=data.get("DHCPEnabled", False),
            use_dns_servers=data.get("UseDNSServers", False),
            use_domain_name=data.get("UseDomainName", False),
            use_gateway=data.get("UseGateway", False),
            use_ntp_servers=data.get("UseNTPServers", False),
            use_static_routes=data.get("UseStaticRoutes", False),
        )


class DHCPv6Configuration(BaseModel):
    operating_mode: Optional[DHCPv6OperatingMode] = None
    use_dns_servers: bool = False
    use_domain_name: bool = False
    use_ntp_servers: bool = False
    use_rapid_commit: bool = False

    def to_redfish(self) -> dict:
        data = {
            "UseDNSServers": self.use_dns_servers,
            "UseDomainName": self.use_domain_name,
            "UseNTPServers": self.use_ntp_servers,
            "UseRapidCommit": self.use_rapid_commit,
        }
        if self.operating_mode is not None:
            data["OperatingMode"] = self.operating_mode.value
        return data

    @classmethod
    def from_redfish(cls, data: dict) -> "DHCPv6Configuration":
        return cls(
            operating_mode=data.get("OperatingMode"),
            use_dns_servers=data.get("UseDNSServers", False),
            use_domain_name=data.get("UseDomainName", False),
            use_ntp_servers=data.get("UseNTPServers", False),
            use_rapid_commit=data.get("UseRapidCommit", False),
        )


class IPv4StaticAddress(BaseModel):
    address: Optional[str] = None
    gateway: Optional[str] = None
    subnet_mask: Optional[str] = None
    address_origin: Optional[str] = None  # Computed by the BMC

    @field_validator("address", "gateway", "subnet_mask")
    @classmethod
    def validate_ipv4(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not re.match(IPV4_PATTERN, value):
            raise ValueError(f"Not a valid ipv4 value: {value}")
        return value

    def to_redfish(self) -> dict:
        data = {}
        if self.address is not None:
            data["Address"] = self.address
        if self.gateway is not None:
            data["Gateway"] = self.gateway
        if self.subnet_mask is not None:
            data["SubnetMask"] = self.subnet_mask
        return data

    @classmethod
    def from_redfish(cls, data: dict) -> "IPv4StaticAddress":
        return cls(
            address=data.get("Address") or None,
            gateway=data.get("Gateway") or None,
            subnet_mask=data.get("SubnetMask") or None,
            address_origin=data.get("AddressOrigin") or None,
        )


class EthernetInterfaceSummary(BaseModel):
    """Entry of the ethernet interfaces data source."""
    odata_id: str
    id: str


class EthernetInterfaceState(BaseModel):
    """Observed configuration of one BMC ethernet interface."""
    id: str  # @odata.id of the interface
    manager_id: str
    ethernet_interface_id: str
    dhcpv4: Optional[DHCPv4Configuration] = None
    dhcpv6: Optional[DHCPv6Configuration] = None
    ipv4_static_addresses: List[IPv4StaticAddress] = []


class PowerConfig(BaseModel):
    """redfish_power resource configuration."""
    redfish_server: List[RedfishServer] = Field(min_length=1, max_length=1)
    desired_power_action: ResetType
    maximum_wait_time: int = Field(default=120, ge=0)
    check_interval: int = Field(default=10, gt=0)
    power_state: Optional[PowerState] = None  # Computed


class BootOrderConfig(BaseModel):
    """redfish_boot_order resource configuration; exactly one of boot_order and boot_options."""
    redfish_server: List[RedfishServer] = Field(min_length=1, max_length=1)
    reset_type: ResetType = ResetType.FORCE_RESTART
    reset_timeout: int = Field(default=120, ge=0)
    boot_order: Optional[List[str]] = None
    boot_options: Optional[List[BootOption]] = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> "BootOrderConfig":
        if (self.boot_order is None) == (self.boot_options is None):
            raise ValueError("Exactly one of boot_order or boot_options must be set")
        return self


class EthernetInterfaceConfig(BaseModel):
    """redfish_ethernet_interface resource configuration."""
    redfish_server: List[RedfishServer] = Field(min_length=1, max_length=1)
    manager_id: str = "1"
    ethernet_interface_id: str = "1"
    dhcpv4: Optional[DHCPv4Configuration] = None
    dhcpv6: Optional[DHCPv6Configuration] = None
    ipv4_static_addresses: Optional[List[IPv4StaticAddress]] = None
    check_server_status: bool = True
