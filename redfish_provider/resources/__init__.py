"""Resources and data sources of the Redfish provider"""

from .power import PowerResource
from .boot_order import BootOrderResource
from .ethernet_interface import EthernetInterfaceResource
from .data_sources import EthernetInterfacesDataSource, EthernetInterfaceDataSource

__all__ = [
    'PowerResource',
    'BootOrderResource',
    'EthernetInterfaceResource',
    'EthernetInterfacesDataSource',
    'EthernetInterfaceDataSource',
]
