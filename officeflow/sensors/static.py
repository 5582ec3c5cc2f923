"""
Static sensor implementations.

Values come from files or from constructor arguments instead of hardware.
"""
import base64
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from officeflow.errors import CameraError
from officeflow.models import GeocodedPlace, LocationAccuracy, LocationReading, WifiState
from .base import Camera, Feedback, LocationProvider, WifiReader

logger = logging.getLogger(__name__)


class FileCamera(Camera):
    """Returns the contents of an image file as the captured picture."""

    def __init__(self, image_path: Optional[Path]):
        self.image_path = Path(image_path) if image_path else None

    def take_picture(self) -> str:
        if self.image_path is None:
            raise CameraError("No image file configured for the camera")
        try:
            data = self.image_path.read_bytes()
        except OSError as e:
            raise CameraError(f"Cannot read {self.image_path}: {e}") from e
        if not data:
            raise CameraError(f"{self.image_path} is empty")
        logger.debug(f"Captured {len(data)} bytes from {self.image_path}")
        return base64.b64encode(data).decode("ascii")


class StaticCamera(Camera):
    """Always returns the same base64 picture."""

    def __init__(self, picture: str = ""):
        self.picture = picture
        self.shots = 0

    def take_picture(self) -> str:
        self.shots += 1
        if not self.picture:
            raise CameraError("Camera returned no picture")
        return self.picture


class StaticLocationProvider(LocationProvider):
    """
    Fixed GPS position.

    A reading of None simulates a device without a fix.
    """

    def __init__(
        self,
        reading: Optional[LocationReading] = None,
        places: Optional[Sequence[GeocodedPlace]] = None,
    ):
        self.reading = reading
        self.places = list(places or [])
        self.requests: List[LocationAccuracy] = []

    def get_current_position(
        self, accuracy: LocationAccuracy = LocationAccuracy.BALANCED
    ) -> Optional[LocationReading]:
        self.requests.append(accuracy)
        return self.reading

    def reverse_geocode(self, latitude: float, longitude: float) -> List[GeocodedPlace]:
        return list(self.places)


class StaticWifiReader(WifiReader):
    def __init__(self, state: Optional[WifiState] = None):
        self.state = state or WifiState()

    def fetch(self) -> WifiState:
        return self.state


class NullFeedback(Feedback):
    """Records notifications instead of vibrating."""

    def __init__(self):
        self.events: List[str] = []

    def notify(self, kind: str) -> None:
        logger.debug(f"Feedback: {kind}")
        self.events.append(kind)
