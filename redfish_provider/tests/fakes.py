"""In-memory stand-ins for a Redfish service used by the tests."""

import copy

from redfish_provider.redfish.enums import PowerState
from redfish_provider.redfish.errors import RedfishError


class FakeSystem:
    """Computer system snapshot with a recorded reset history."""

    def __init__(self, service, power_state):
        self.service = service
        self.power_state = PowerState.parse(power_state)

    def reset(self, reset_type):
        if self.service.reset_error is not None:
            raise self.service.reset_error
        self.service.resets.append(reset_type)


class FakeService:
    """
    Serves a scripted sequence of power states, one per systems() call.

    The last state repeats once the script runs out. An entry that is an
    exception instance is raised instead of returned.
    """

    endpoint = "https://bmc.example.com"

    def __init__(self, *states, reset_error=None, no_systems=False):
        self.states = list(states)
        self.reset_error = reset_error
        self.no_systems = no_systems
        self.resets = []
        self.fetches = 0

    def systems(self):
        self.fetches += 1
        if self.no_systems:
            return []
        state = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        if isinstance(state, Exception):
            raise state
        return [FakeSystem(self, state)]


SYSTEM = "/redfish/v1/Systems/System.Embedded.1"
MANAGER = "/redfish/v1/Managers/iDRAC.Embedded.1"
NIC = MANAGER + "/EthernetInterfaces/NIC.1"


def bmc_documents():
    """Redfish documents of a single-system BMC with one network interface."""
    return {
        "/redfish/v1/": {
            "@odata.id": "/redfish/v1/",
            "Systems": {"@odata.id": "/redfish/v1/Systems"},
            "Managers": {"@odata.id": "/redfish/v1/Managers"},
        },
        "/redfish/v1/Systems": {"Members": [{"@odata.id": SYSTEM}]},
        SYSTEM: {
            "@odata.id": SYSTEM,
            "Id": "System.Embedded.1",
            "PowerState": "On",
            "Boot": {
                "BootOrder": ["Boot0001", "Boot0002"],
                "BootOptions": {"@odata.id": SYSTEM + "/BootOptions"},
            },
            "Actions": {
                "#ComputerSystem.Reset": {"target": SYSTEM + "/Actions/ComputerSystem.Reset"},
            },
        },
        SYSTEM + "/BootOptions": {
            "Members": [
                {"@odata.id": SYSTEM + "/BootOptions/Boot0001"},
                {"@odata.id": SYSTEM + "/BootOptions/Boot0002"},
            ]
        },
        SYSTEM + "/BootOptions/Boot0001": {
            "@odata.id": SYSTEM + "/BootOptions/Boot0001",
            "Id": "Boot0001",
            "BootOptionReference": "Boot0001",
            "BootOptionEnabled": True,
        },
        SYSTEM + "/BootOptions/Boot0002": {
            "@odata.id": SYSTEM + "/BootOptions/Boot0002",
            "Id": "Boot0002",
            "BootOptionReference": "Boot0002",
            "BootOptionEnabled": False,
        },
        "/redfish/v1/Managers": {"Members": [{"@odata.id": MANAGER}]},
        MANAGER: {
            "@odata.id": MANAGER,
            "Id": "iDRAC.Embedded.1",
            "EthernetInterfaces": {"@odata.id": MANAGER + "/EthernetInterfaces"},
        },
        MANAGER + "/EthernetInterfaces": {"Members": [{"@odata.id": NIC}]},
        NIC: {
            "@odata.id": NIC,
            "Id": "NIC.1",
            "DHCPv4": {
                "DHCPEnabled": True,
                "UseDNSServers": True,
                "UseDomainName": True,
                "UseGateway": True,
                "UseNTPServers": False,
                "UseStaticRoutes": False,
            },
            "DHCPv6": {
                "OperatingMode": "Stateful",
                "UseDNSServers": True,
                "UseDomainName": False,
                "UseNTPServers": False,
                "UseRapidCommit": False,
            },
            "IPv4StaticAddresses": [
                {
                    "Address": "192.168.0.120",
                    "Gateway": "192.168.0.1",
                    "SubnetMask": "255.255.255.0",
                    "AddressOrigin": "Static",
                }
            ],
        },
    }


def _merge(target, patch):
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)


class FakeAdapter:
    """
    Answers adapter calls from a dict of Redfish documents keyed by path.

    PATCH bodies are merged into the stored document; every call is recorded
    in requests as (method, path, payload).
    """

    endpoint = "https://bmc.example.com"

    def __init__(self, documents, post_error=None):
        self.documents = documents
        self.post_error = post_error
        self.requests = []

    def get(self, path, operation_name=None):
        self.requests.append(("GET", path, None))
        if path not in self.documents:
            raise RedfishError(f"{operation_name or path} failed: not found", status_code=404)
        return copy.deepcopy(self.documents[path])

    def patch(self, path, payload, operation_name=None):
        self.requests.append(("PATCH", path, payload))
        _merge(self.documents[path], payload)
        return {}

    def post(self, path, payload, operation_name=None):
        self.requests.append(("POST", path, payload))
        if self.post_error is not None:
            raise self.post_error
        return {}

    def writes(self):
        return [request for request in self.requests if request[0] != "GET"]
