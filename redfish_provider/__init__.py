"""
Redfish Provider - declarative management of server BMCs over Redfish.

Provides:
- Per-endpoint serialization of mutating operations
- Power state reconciliation with convergence polling
- Post-reboot BMC reachability checks
- Boot order, boot option, ethernet interface and power resources
"""

__version__ = "1.0.0"
__author__ = "Infrastructure Automation"
