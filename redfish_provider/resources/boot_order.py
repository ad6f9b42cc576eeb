"""Boot order and boot option resource"""

import threading
from typing import Any, Dict, Optional

from redfish_provider.credentials import endpoint_key
from redfish_provider.models import BootOrderConfig
from redfish_provider.redfish.errors import ResourceNotFoundError
from redfish_provider.redfish.service import get_system_resource
from .base import BaseResource


class BootOrderResource(BaseResource):
    """
    Manages the persistent boot order, or the enablement of individual boot
    options, and reboots the server so the change takes effect.
    """

    config_model = BootOrderConfig

    def parse_config(self, config) -> BootOrderConfig:
        # reset_type and reset_timeout fall back to the provider defaults
        if isinstance(config, dict):
            config = dict(config)
            config.setdefault('reset_type', self.settings.default_reset_type)
            config.setdefault('reset_timeout', self.settings.default_reset_timeout)
        return super().parse_config(config)

    def _apply(self, config: BootOrderConfig, service) -> bool:
        """Write the desired boot settings; returns True if anything changed."""
        system = get_system_resource(service)

        if config.boot_order is not None:
            if system.boot_order == config.boot_order:
                self.log(f"Boot order of {service.endpoint} already {config.boot_order}", "DEBUG")
                return False
            self.log(f"Setting boot order of {service.endpoint}: {config.boot_order}")
            system.set_boot_order(config.boot_order)
            return True

        options = {option.boot_option_reference: option for option in system.boot_options()}
        changed = False
        for desired in config.boot_options:
            option = options.get(desired.boot_option_reference)
            if option is None:
                raise ResourceNotFoundError(
                    f"Boot option {desired.boot_option_reference} doesn't exist on {service.endpoint}"
                )
            if option.boot_option_enabled != desired.boot_option_enabled:
                self.log(
                    f"Setting boot option {desired.boot_option_reference} enabled="
                    f"{desired.boot_option_enabled} on {service.endpoint}"
                )
                option.set_enabled(desired.boot_option_enabled)
                changed = True
        return changed

    def create(self, config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        config = self.parse_config(config)
        service = self.provider.connect(config.redfish_server)

        with self.provider.lock_endpoint(config.redfish_server, cancel_event=cancel_event):
            if self._apply(config, service):
                power_state = self.provider.power_operator(service, cancel_event=cancel_event).power_operation(
                    config.reset_type,
                    config.reset_timeout,
                    self.settings.default_check_interval
                )
                self.log(f"Power state of {service.endpoint} after {config.reset_type.value} is {power_state.value}")

            state = config.model_dump(mode="json")
            state['id'] = endpoint_key(config.redfish_server)
            return self._read(service, state)

    def update(self, state: Dict[str, Any], config, cancel_event: Optional[threading.Event] = None) -> Dict[str, Any]:
        return self.create(config, cancel_event=cancel_event)

    def read(self, state: Dict[str, Any]) -> Dict[str, Any]:
        config = self.parse_config(state)
        service = self.provider.connect(config.redfish_server)
        return self._read(service, state)

    def _read(self, service, state: Dict[str, Any]) -> Dict[str, Any]:
        system = get_system_resource(service)
        state = dict(state)

        if state.get('boot_order') is not None:
            state['boot_order'] = system.boot_order
        else:
            observed = {option.boot_option_reference: option for option in system.boot_options()}
            state['boot_options'] = [
                {
                    'boot_option_reference': ref,
                    'boot_option_enabled': observed[ref].boot_option_enabled,
                }
                for ref in (o['boot_option_reference'] for o in state.get('boot_options') or [])
                if ref in observed
            ]
        return state
