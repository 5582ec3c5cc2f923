"""
Office network policy for attendance actions.

Check-in and check-out are mutually exclusive and depend only on the
user's current status. The office WiFi is a soft requirement: being off
the office network adds a badge and a warning, never a hard block.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from officeflow.models import AttendanceType, WifiState

logger = logging.getLogger(__name__)

OFFICE_ONLY_BADGE = "OFFICE ONLY"
ALREADY_IN_BADGE = "ALREADY IN"
ALREADY_OUT_BADGE = "ALREADY OUT"


class OfficeNetworkGate:
    """
    Compares the connected WiFi with the office SSID.

    An empty office SSID means there is no restriction.
    """

    def __init__(self, office_ssid: Optional[str] = None):
        self.office_ssid = (office_ssid or "").strip()

    @classmethod
    def resolve(cls, server_ssid: Optional[str], configured_ssid: Optional[str]) -> "OfficeNetworkGate":
        """The SSID announced by the server wins over the local setting."""
        return cls(server_ssid or configured_ssid)

    @property
    def is_restricted(self) -> bool:
        return bool(self.office_ssid)

    def allows(self, wifi: Optional[WifiState]) -> bool:
        if not self.is_restricted:
            return True
        return wifi is not None and wifi.connected and wifi.ssid == self.office_ssid

    def warning_message(self) -> str:
        return f"Please connect to the office WiFi ({self.office_ssid}) to perform check-in/out."


@dataclass(frozen=True)
class ActionAvailability:
    """Enablement and badges of the two attendance buttons."""
    check_in_enabled: bool
    check_out_enabled: bool
    check_in_badge: Optional[str] = None
    check_out_badge: Optional[str] = None
    on_office_network: bool = True

    def is_enabled(self, action: AttendanceType) -> bool:
        if action == AttendanceType.CHECK_IN:
            return self.check_in_enabled
        if action == AttendanceType.CHECK_OUT:
            return self.check_out_enabled
        return False


def evaluate_actions(current_status: AttendanceType, on_office_network: bool) -> ActionAvailability:
    """
    Work out which attendance action is available.

    Exactly one of check-in/check-out is enabled, chosen by current_status
    alone. When the device is off the office network both buttons carry the
    "OFFICE ONLY" badge instead of the status badge.

    Args:
        current_status: The user's last recorded action
        on_office_network: Whether the office gate currently allows the device

    Returns:
        ActionAvailability for the home screen
    """
    checked_in = current_status == AttendanceType.CHECK_IN

    if on_office_network:
        check_in_badge = ALREADY_IN_BADGE if checked_in else None
        check_out_badge = None if checked_in else ALREADY_OUT_BADGE
    else:
        check_in_badge = check_out_badge = OFFICE_ONLY_BADGE

    return ActionAvailability(
        check_in_enabled=not checked_in,
        check_out_enabled=checked_in,
        check_in_badge=check_in_badge,
        check_out_badge=check_out_badge,
        on_office_network=on_office_network,
    )
