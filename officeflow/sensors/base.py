"""
Device adapter interfaces.

The capture workflow only talks to these interfaces. Real OS bindings are
out of scope; the static implementations in officeflow.sensors.static are
what the CLI and the tests plug in.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from officeflow.models import GeocodedPlace, LocationAccuracy, LocationReading, WifiState


class Camera(ABC):
    """Front camera."""

    @abstractmethod
    def take_picture(self) -> str:
        """
        Capture one frame.

        Returns:
            The picture as a base64 encoded JPEG

        Raises:
            CameraError: If no picture could be taken
        """


class LocationProvider(ABC):

    @abstractmethod
    def get_current_position(
        self, accuracy: LocationAccuracy = LocationAccuracy.BALANCED
    ) -> Optional[LocationReading]:
        """
        Get a fresh GPS fix.

        Returns:
            The reading, or None if the OS could not provide one
        """

    @abstractmethod
    def reverse_geocode(self, latitude: float, longitude: float) -> List[GeocodedPlace]:
        """Resolve coordinates to candidate places, best match first."""


class WifiReader(ABC):

    @abstractmethod
    def fetch(self) -> WifiState:
        """Read the current WiFi association."""


class DeviceIdentity(ABC):

    @abstractmethod
    def get_device_id(self) -> str:
        """Stable identifier of this device."""


class Feedback(ABC):
    """Haptic/audible feedback."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"

    @abstractmethod
    def notify(self, kind: str) -> None:
        pass
