"""Power control resource"""

import threading
from typing import Any, Dict, Optional

from redfish_provider.credentials import endpoint_key
from redfish_provider.models import PowerConfig
from redfish_provider.redfish.service import get_system_resource
from .base import BaseResource


class PowerResource(BaseResource):
    """Drives a server to the power state implied by desired_power_action"""

    config_model = PowerConfig

    def create(self, config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        config = self.parse_config(config)
        service = self.provider.connect(config.redfish_server)

        with self.provider.lock_endpoint(config.redfish_server, cancel_event=cancel_event):
            power_state = self.provider.power_operator(service, cancel_event=cancel_event).power_operation(
                config.desired_power_action,
                config.maximum_wait_time,
                config.check_interval
            )

        self.log(f"Power state of {service.endpoint} is {power_state.value}")
        state = config.model_dump(mode="json")
        state['power_state'] = power_state.value
        state['id'] = endpoint_key(config.redfish_server)
        return state

    def update(self, state: Dict[str, Any], config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        return self.create(config, cancel_event=cancel_event)

    def read(self, state: Dict[str, Any]) -> Dict[str, Any]:
        config = self.parse_config(state)
        service = self.provider.connect(config.redfish_server)
        system = get_system_resource(service)
        return dict(state, power_state=system.power_state.value)
