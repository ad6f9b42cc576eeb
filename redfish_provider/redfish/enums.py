"""Redfish enumerations used by the power and boot operations."""

from enum import Enum


class ResetType(str, Enum):
    """ComputerSystem.Reset action values"""
    ON = "On"
    FORCE_ON = "ForceOn"
    FORCE_OFF = "ForceOff"
    GRACEFUL_SHUTDOWN = "GracefulShutdown"
    GRACEFUL_RESTART = "GracefulRestart"
    FORCE_RESTART = "ForceRestart"
    POWER_CYCLE = "PowerCycle"
    NMI = "Nmi"
    PUSH_POWER_BUTTON = "PushPowerButton"


class PowerState(str, Enum):
    """ComputerSystem.PowerState values"""
    ON = "On"
    OFF = "Off"
    POWERING_ON = "PoweringOn"
    POWERING_OFF = "PoweringOff"
    PAUSED = "Paused"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> "PowerState":
        """Map a raw PowerState property to the enum, Unknown if unrecognised."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class DHCPv6OperatingMode(str, Enum):
    STATEFUL = "Stateful"
    STATELESS = "Stateless"
    DISABLED = "Disabled"
    ENABLED = "Enabled"
