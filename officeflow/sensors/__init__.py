"""Device sensor adapters."""
from .base import Camera, DeviceIdentity, Feedback, LocationProvider, WifiReader
from .device import DEVICE_ID_KEY, StoredDeviceIdentity
from .static import FileCamera, NullFeedback, StaticCamera, StaticLocationProvider, StaticWifiReader

__all__ = [
    "Camera",
    "DeviceIdentity",
    "Feedback",
    "LocationProvider",
    "WifiReader",
    "DEVICE_ID_KEY",
    "StoredDeviceIdentity",
    "FileCamera",
    "NullFeedback",
    "StaticCamera",
    "StaticLocationProvider",
    "StaticWifiReader",
]
