"""
Power Operations

Drives a computer system through a requested reset and polls until the
expected power state is observed or the wait budget runs out.

The operator only observes hardware state; it does not own it. It is run
while the caller already holds the endpoint lock and never takes the lock
itself.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from redfish_provider.redfish.enums import PowerState, ResetType
from redfish_provider.redfish.errors import (
    OperationCancelledError,
    PowerOperationError,
    RedfishError,
    SystemNotFoundError,
)
from redfish_provider.redfish.service import RedfishService, get_system_resource


@dataclass(frozen=True)
class PowerTransition:
    """Resolved plan for one reset request"""
    reset_type: ResetType
    current_state: PowerState
    issued_action: Optional[ResetType]
    target_state: PowerState
    short_circuit: bool


# Columns of the transition table; any state other than On or Off (PoweringOn,
# PoweringOff, Paused, Unknown) falls in OTHER.
ON, OFF, OTHER = "on", "off", "other"

# requested action -> column -> (issued action, target state, short circuit)
# REQUESTED means the requested action is issued unchanged.
REQUESTED = "requested"

_SHUTDOWN = {
    ON: (REQUESTED, PowerState.OFF, False),
    OFF: (None, PowerState.OFF, True),
    OTHER: (REQUESTED, PowerState.OFF, False),
}
_POWER_ON = {
    ON: (None, PowerState.ON, True),
    OFF: (REQUESTED, PowerState.ON, False),
    OTHER: (REQUESTED, PowerState.ON, False),
}
# A restart of a powered-off machine is issued as a plain power-on
_RESTART = {
    ON: (REQUESTED, PowerState.ON, False),
    OFF: (ResetType.ON, PowerState.ON, False),
    OTHER: (REQUESTED, PowerState.ON, False),
}
_TOGGLE = {
    ON: (REQUESTED, PowerState.OFF, False),
    OFF: (REQUESTED, PowerState.ON, False),
    OTHER: (REQUESTED, PowerState.OFF, False),
}

POWER_TRANSITIONS: Dict[ResetType, Dict[str, Tuple]] = {
    ResetType.FORCE_OFF: _SHUTDOWN,
    ResetType.GRACEFUL_SHUTDOWN: _SHUTDOWN,
    ResetType.ON: _POWER_ON,
    ResetType.FORCE_ON: _POWER_ON,
    ResetType.FORCE_RESTART: _RESTART,
    ResetType.GRACEFUL_RESTART: _RESTART,
    ResetType.POWER_CYCLE: _RESTART,
    ResetType.NMI: _RESTART,
    ResetType.PUSH_POWER_BUTTON: _TOGGLE,
}

_missing = set(ResetType) - set(POWER_TRANSITIONS)
if _missing:
    raise RuntimeError(f"No power transition defined for: {sorted(m.value for m in _missing)}")


def _column(state: PowerState) -> str:
    if state == PowerState.ON:
        return ON
    if state == PowerState.OFF:
        return OFF
    return OTHER


def resolve_power_transition(reset_type, current_state) -> PowerTransition:
    """
    Work out which action to issue and which power state to wait for.

    Args:
        reset_type: Requested ResetType (or its string value)
        current_state: PowerState observed before the operation

    Returns:
        PowerTransition
    """
    reset_type = ResetType(reset_type)
    current_state = PowerState.parse(current_state)

    issued, target, short_circuit = POWER_TRANSITIONS[reset_type][_column(current_state)]
    if issued == REQUESTED:
        issued = reset_type

    return PowerTransition(
        reset_type=reset_type,
        current_state=current_state,
        issued_action=issued,
        target_state=target,
        short_circuit=short_circuit,
    )


class PowerOperator:
    """
    Executes power operations against the first system of a Redfish service.

    Timing is in whole seconds. When a cancel_event is supplied, every pause
    waits on it and the operation aborts as soon as it is set.
    """

    def __init__(
        self,
        service: RedfishService,
        logger: Optional[logging.Logger] = None,
        cancel_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.service = service
        self.logger = logger or logging.getLogger(__name__)
        self.cancel_event = cancel_event
        self.sleep = sleep

    @property
    def endpoint(self) -> str:
        return self.service.endpoint

    def _pause(self, seconds: int):
        if self.cancel_event is not None:
            if self.cancel_event.wait(seconds):
                raise OperationCancelledError(f"Power operation on {self.endpoint} cancelled")
        else:
            self.sleep(seconds)

    def power_operation(self, reset_type, maximum_wait_time: int, check_interval: int) -> PowerState:
        """
        Run a power operation and wait for the resulting state.

        Args:
            reset_type: ResetType to request
            maximum_wait_time: Upper bound in seconds on polling for the target state
            check_interval: Seconds between power state checks

        Returns:
            PowerState: The target state once observed, the current state when no
            action was needed, or the last observed state if the wait budget ran
            out. Running out of time is not an error; compare the returned state
            with the intended one to detect it.

        Raises:
            SystemNotFoundError: If the endpoint reports no systems
            PowerOperationError: If the initial lookup, the reset or a state re-fetch fails
            ValueError: If check_interval is not positive
            OperationCancelledError: If the cancel event is set while waiting
        """
        reset_type = ResetType(reset_type)
        if check_interval <= 0:
            raise ValueError(f"check_interval must be positive, got {check_interval}")

        try:
            system = get_system_resource(self.service)
        except SystemNotFoundError:
            self.logger.error(f"No computer system found on {self.endpoint}")
            raise
        except RedfishError as e:
            self.logger.error(f"Failed to identify system on {self.endpoint}: {e}")
            raise PowerOperationError(
                f"Failed to read power state of {self.endpoint} before reset "
                f"({reset_type.value}): {e.message}",
                power_state=None,
                reset_type=reset_type,
                endpoint=self.endpoint,
                status_code=e.status_code,
            ) from e

        transition = resolve_power_transition(reset_type, system.power_state)

        if transition.short_circuit:
            self.logger.debug(
                f"Server {self.endpoint} already powered {transition.current_state.value}. No action required."
            )
            return transition.current_state

        self.logger.info(
            f"Performing system reset ({transition.issued_action.value}) on {self.endpoint}, "
            f"target power state {transition.target_state.value}"
        )
        try:
            system.reset(transition.issued_action)
        except RedfishError as e:
            self.logger.warning(f"System reset on {self.endpoint} returned an error: {e}")
            raise PowerOperationError(
                f"System reset ({transition.issued_action.value}) on {self.endpoint} failed: {e.message}",
                power_state=system.power_state,
                reset_type=transition.issued_action,
                endpoint=self.endpoint,
                status_code=e.status_code,
            ) from e

        last_state = system.power_state
        total_time = 0
        while total_time < maximum_wait_time:
            self._pause(check_interval)
            total_time += check_interval
            self.logger.debug(f"Total time is {total_time} seconds. Checking power state of {self.endpoint} now.")

            try:
                system = get_system_resource(self.service)
            except RedfishError as e:
                self.logger.error(f"Failed to identify system on {self.endpoint}: {e}")
                raise PowerOperationError(
                    f"Failed to read power state of {self.endpoint} after reset "
                    f"({transition.issued_action.value}): {e.message}",
                    power_state=last_state,
                    reset_type=transition.issued_action,
                    endpoint=self.endpoint,
                    status_code=e.status_code,
                ) from e

            last_state = system.power_state
            if last_state == transition.target_state:
                self.logger.debug(f"System reset on {self.endpoint} successful")
                return last_state

        self.logger.warning(
            f"The system {self.endpoint} failed to reach power state {transition.target_state.value} "
            f"within {maximum_wait_time}s; last observed state is {last_state.value}"
        )
        return last_state
