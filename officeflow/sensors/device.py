"""Stable device identity kept in the secure store."""
import logging
import uuid
from typing import Optional

from officeflow.storage import SecureStore
from .base import DeviceIdentity

logger = logging.getLogger(__name__)

DEVICE_ID_KEY = "deviceId"


class StoredDeviceIdentity(DeviceIdentity):
    """
    Generates a UUID on first use and persists it.

    The id survives logout so the server keeps seeing the same device.
    An explicit override (OFFICEFLOW_DEVICE_ID) wins over the stored value.
    """

    def __init__(self, store: SecureStore, override: Optional[str] = None):
        self.store = store
        self.override = override

    def get_device_id(self) -> str:
        if self.override:
            return self.override
        device_id = self.store.get_item(DEVICE_ID_KEY)
        if not device_id:
            device_id = str(uuid.uuid4())
            self.store.set_item(DEVICE_ID_KEY, device_id)
            logger.info(f"Generated new device id {device_id}")
        return device_id
