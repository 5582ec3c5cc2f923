"""
Session credentials and their persistence in the secure store.

Email, password and the JSON profile are persisted under fixed keys so the
login screen can sign the user back in. The auth token lives in memory only.
"""
import json
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from officeflow.api.schemas import UserProfile
from officeflow.errors import StorageError
from officeflow.storage import SecureStore, obfuscate_credential
from officeflow.utils import mask_email

logger = logging.getLogger(__name__)

USER_EMAIL_KEY = "userEmail"
USER_PASSWORD_KEY = "userPassword"
USER_DATA_KEY = "userData"
SESSION_KEYS = (USER_EMAIL_KEY, USER_PASSWORD_KEY, USER_DATA_KEY)


@dataclass
class SessionCredentials:
    """The signed-in user."""
    email: str
    password: str
    auth_token: Optional[str] = None
    profile: Optional[UserProfile] = None

    def __repr__(self) -> str:
        return f"SessionCredentials(email={mask_email(self.email)!r}, password='***')"


class SessionManager:
    """Owns the current session and its persisted copy."""

    def __init__(self, store: SecureStore):
        self.store = store
        self.current: Optional[SessionCredentials] = None

    @property
    def is_signed_in(self) -> bool:
        return self.current is not None

    def save(
        self,
        email: str,
        password: str,
        auth_token: Optional[str] = None,
        profile: Optional[UserProfile] = None,
    ) -> SessionCredentials:
        """
        Persist the three session keys and make this the current session.

        Raises:
            StorageError: If the store cannot be written
        """
        self.store.set_item(USER_EMAIL_KEY, email)
        self.store.set_item(USER_PASSWORD_KEY, password)
        profile_json = profile.model_dump_json() if profile is not None else "null"
        self.store.set_item(USER_DATA_KEY, profile_json)
        self.current = SessionCredentials(
            email=email, password=password, auth_token=auth_token, profile=profile
        )
        logger.info(f"Session saved for {mask_email(email)}")
        return self.current

    def load_saved_credentials(self) -> Optional[Tuple[str, str]]:
        """
        Return (email, password) if both are stored, else None.

        A store that cannot be decrypted is treated as empty.
        """
        try:
            email = self.store.get_item(USER_EMAIL_KEY)
            password = self.store.get_item(USER_PASSWORD_KEY)
        except StorageError as e:
            logger.warning(f"Saved credentials are unreadable: {e}")
            return None
        if email and password:
            return email, password
        return None

    def load_profile(self) -> Optional[UserProfile]:
        """Cached profile from the last login or registration."""
        if self.current is not None and self.current.profile is not None:
            return self.current.profile
        try:
            raw = self.store.get_item(USER_DATA_KEY)
            if not raw:
                return None
            data = json.loads(raw)
        except (StorageError, ValueError) as e:
            logger.warning(f"Failed to load saved user: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return UserProfile.model_validate(data)

    def update_profile(self, profile: UserProfile) -> None:
        """Replace the cached profile after an explicit refresh."""
        self.store.set_item(USER_DATA_KEY, profile.model_dump_json())
        if self.current is not None:
            self.current.profile = profile

    def clear(self) -> None:
        """
        Forget the session: delete all three stored keys and scrub the
        in-memory copy.

        Every key is attempted even if one deletion fails; the first failure
        is re-raised afterwards.
        """
        first_error: Optional[StorageError] = None
        for key in SESSION_KEYS:
            try:
                self.store.delete_item(key)
            except StorageError as e:
                logger.error(f"Failed to delete {key}: {e}")
                first_error = first_error or e

        if self.current is not None:
            self.current.password = obfuscate_credential(self.current.password)
            if self.current.auth_token:
                self.current.auth_token = obfuscate_credential(self.current.auth_token)
            logger.info(f"Session cleared for {mask_email(self.current.email)}")
        self.current = None

        if first_error is not None:
            raise first_error

    logout = clear
