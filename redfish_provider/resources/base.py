"""Base class for resources and data sources"""

from typing import Any, Dict, Type

from pydantic import BaseModel


class BaseResource:
    """Base class for all resources with shared utilities"""

    config_model: Type[BaseModel] = None

    def __init__(self, provider):
        """
        Initialize resource with reference to the provider

        Args:
            provider: RedfishProvider giving access to settings, locks and sessions
        """
        self.provider = provider

    @property
    def settings(self):
        return self.provider.settings

    def log(self, message: str, level: str = "INFO"):
        """
        Log message through the provider

        Args:
            message: Log message
            level: Log level (INFO, WARN, ERROR, DEBUG)
        """
        self.provider.log(message, level)

    def parse_config(self, config) -> BaseModel:
        """
        Validate raw configuration against the resource's model

        Raises:
            pydantic.ValidationError: If the configuration is invalid
        """
        if isinstance(config, self.config_model):
            return config
        return self.config_model.model_validate(config)

    def delete(self, state: Dict[str, Any]) -> None:
        """Forget the resource; the BMC setting is left as it is."""
        self.log(f"Removing {type(self).__name__} {state.get('id')} from state", "DEBUG")
