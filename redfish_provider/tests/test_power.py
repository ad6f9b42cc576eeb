import threading
import unittest

from redfish_provider.power import PowerOperator, resolve_power_transition
from redfish_provider.redfish.enums import PowerState, ResetType
from redfish_provider.redfish.errors import (
    OperationCancelledError,
    PowerOperationError,
    RedfishError,
    SystemNotFoundError,
)
from redfish_provider.tests.fakes import FakeService


class RecordingSleep:
    """Replaces time.sleep and records each pause."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class PowerTransitionTests(unittest.TestCase):
    def test_every_reset_type_resolves_for_every_state(self):
        for reset_type in ResetType:
            for state in PowerState:
                transition = resolve_power_transition(reset_type, state)
                self.assertIn(transition.target_state, (PowerState.ON, PowerState.OFF))
                if not transition.short_circuit:
                    self.assertIsNotNone(transition.issued_action)

    def test_shutdown_when_off_short_circuits(self):
        for reset_type in (ResetType.FORCE_OFF, ResetType.GRACEFUL_SHUTDOWN):
            transition = resolve_power_transition(reset_type, PowerState.OFF)
            self.assertTrue(transition.short_circuit)
            self.assertIsNone(transition.issued_action)

    def test_shutdown_when_on_targets_off(self):
        transition = resolve_power_transition(ResetType.GRACEFUL_SHUTDOWN, PowerState.ON)
        self.assertFalse(transition.short_circuit)
        self.assertEqual(transition.issued_action, ResetType.GRACEFUL_SHUTDOWN)
        self.assertEqual(transition.target_state, PowerState.OFF)

    def test_power_on_when_on_short_circuits(self):
        for reset_type in (ResetType.ON, ResetType.FORCE_ON):
            transition = resolve_power_transition(reset_type, PowerState.ON)
            self.assertTrue(transition.short_circuit)

    def test_restart_of_powered_off_server_is_issued_as_on(self):
        for reset_type in (ResetType.FORCE_RESTART, ResetType.GRACEFUL_RESTART,
                           ResetType.POWER_CYCLE, ResetType.NMI):
            transition = resolve_power_transition(reset_type, PowerState.OFF)
            self.assertEqual(transition.issued_action, ResetType.ON)
            self.assertEqual(transition.target_state, PowerState.ON)

    def test_restart_of_running_server_keeps_requested_action(self):
        transition = resolve_power_transition("PowerCycle", "On")
        self.assertEqual(transition.issued_action, ResetType.POWER_CYCLE)
        self.assertEqual(transition.target_state, PowerState.ON)

    def test_push_power_button_toggles(self):
        on = resolve_power_transition(ResetType.PUSH_POWER_BUTTON, PowerState.ON)
        off = resolve_power_transition(ResetType.PUSH_POWER_BUTTON, PowerState.OFF)
        self.assertEqual((on.issued_action, on.target_state), (ResetType.PUSH_POWER_BUTTON, PowerState.OFF))
        self.assertEqual((off.issued_action, off.target_state), (ResetType.PUSH_POWER_BUTTON, PowerState.ON))

    def test_transitioning_state_is_not_treated_as_satisfied(self):
        transition = resolve_power_transition(ResetType.ON, PowerState.POWERING_OFF)
        self.assertFalse(transition.short_circuit)
        self.assertEqual(transition.issued_action, ResetType.ON)

    def test_unknown_reset_type_is_rejected(self):
        with self.assertRaises(ValueError):
            resolve_power_transition("Reboot", PowerState.ON)


class PowerOperatorTests(unittest.TestCase):
    def setUp(self):
        self.sleep = RecordingSleep()

    def operator(self, service, **kwargs):
        return PowerOperator(service, sleep=self.sleep, **kwargs)

    def test_on_when_already_on_issues_nothing(self):
        service = FakeService("On")

        state = self.operator(service).power_operation(ResetType.ON, 10, 2)

        self.assertEqual(state, PowerState.ON)
        self.assertEqual(service.resets, [])
        self.assertEqual(self.sleep.calls, [])

    def test_off_when_already_off_issues_nothing(self):
        service = FakeService("Off")

        state = self.operator(service).power_operation("ForceOff", 10, 2)

        self.assertEqual(state, PowerState.OFF)
        self.assertEqual(service.resets, [])

    def test_force_restart_when_off_issues_on(self):
        service = FakeService("Off", "On")

        state = self.operator(service).power_operation(ResetType.FORCE_RESTART, 10, 2)

        self.assertEqual(service.resets, [ResetType.ON])
        self.assertEqual(state, PowerState.ON)

    def test_push_power_button_on_running_server_waits_for_off(self):
        service = FakeService("On", "On", "Off")

        state = self.operator(service).power_operation(ResetType.PUSH_POWER_BUTTON, 10, 2)

        self.assertEqual(service.resets, [ResetType.PUSH_POWER_BUTTON])
        self.assertEqual(state, PowerState.OFF)
        self.assertEqual(len(self.sleep.calls), 2)

    def test_converges_on_third_poll(self):
        service = FakeService("Off", "Off", "Off", "On")

        state = self.operator(service).power_operation(ResetType.ON, 10, 2)

        self.assertEqual(state, PowerState.ON)
        self.assertEqual(self.sleep.calls, [2, 2, 2])
        # initial lookup plus three polls
        self.assertEqual(service.fetches, 4)

    def test_timeout_returns_last_observed_state_without_error(self):
        service = FakeService("On", "PoweringOff", "PoweringOff", "On")

        state = self.operator(service).power_operation(ResetType.GRACEFUL_SHUTDOWN, 10, 2)

        self.assertEqual(state, PowerState.ON)
        self.assertEqual(self.sleep.calls, [2, 2, 2, 2, 2])
        self.assertEqual(service.resets, [ResetType.GRACEFUL_SHUTDOWN])

    def test_reset_failure_raises_with_pre_operation_state_and_skips_polling(self):
        cause = RedfishError("System Reset (ForceOff) failed", status_code=400)
        service = FakeService("On", reset_error=cause)

        with self.assertRaises(PowerOperationError) as ctx:
            self.operator(service).power_operation(ResetType.FORCE_OFF, 10, 2)

        self.assertEqual(ctx.exception.power_state, PowerState.ON)
        self.assertEqual(ctx.exception.reset_type, ResetType.FORCE_OFF)
        self.assertEqual(ctx.exception.endpoint, FakeService.endpoint)
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(self.sleep.calls, [])
        self.assertEqual(service.fetches, 1)

    def test_fetch_failure_during_polling_is_fatal(self):
        """A failed re-fetch aborts the call even though a timeout would not."""
        service = FakeService("Off", "Off", RedfishError("GET /redfish/v1/Systems failed"))

        with self.assertRaises(PowerOperationError) as ctx:
            self.operator(service).power_operation(ResetType.ON, 10, 2)

        self.assertEqual(ctx.exception.power_state, PowerState.OFF)
        self.assertEqual(len(self.sleep.calls), 2)

    def test_no_systems_raises_system_not_found(self):
        service = FakeService("On", no_systems=True)

        with self.assertRaises(SystemNotFoundError):
            self.operator(service).power_operation(ResetType.ON, 10, 2)

        self.assertEqual(service.resets, [])

    def test_transport_failure_on_initial_lookup_is_wrapped(self):
        cause = RedfishError("GET /redfish/v1/Systems failed: timeout", status_code=504)
        service = FakeService(cause)

        with self.assertRaises(PowerOperationError) as ctx:
            self.operator(service).power_operation(ResetType.ON, 10, 2)

        self.assertEqual(ctx.exception.endpoint, FakeService.endpoint)
        self.assertEqual(ctx.exception.reset_type, ResetType.ON)
        self.assertIsNone(ctx.exception.power_state)
        self.assertEqual(ctx.exception.status_code, 504)
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertIn(FakeService.endpoint, ctx.exception.message)
        self.assertEqual(service.resets, [])

    def test_non_positive_check_interval_is_rejected(self):
        for interval in (0, -5):
            service = FakeService("Off")

            with self.assertRaises(ValueError):
                self.operator(service).power_operation(ResetType.ON, 10, interval)

            self.assertEqual(service.fetches, 0)
            self.assertEqual(service.resets, [])

    def test_cancel_event_stops_polling(self):

        service = FakeService("Off")
        cancel = threading.Event()
        cancel.set()

        with self.assertRaises(OperationCancelledError):
            self.operator(service, cancel_event=cancel).power_operation(ResetType.ON, 10, 2)

        # the reset was issued before the first pause observed the cancellation
        self.assertEqual(service.resets, [ResetType.ON])
        self.assertEqual(service.fetches, 1)

    def test_zero_wait_time_returns_pre_operation_state(self):
        service = FakeService("Off")

        state = self.operator(service).power_operation(ResetType.ON, 0, 2)

        self.assertEqual(state, PowerState.OFF)
        self.assertEqual(service.resets, [ResetType.ON])
        self.assertEqual(self.sleep.calls, [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
