"""
Profile screen: identity card, face re-enrollment and logout.
"""
import logging
from typing import Dict, Optional

from officeflow import __version__
from officeflow.api.schemas import UserProfile
from officeflow.error_messages import get_friendly_error_message
from officeflow.models import AttendanceType
from .base_screen import BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)

PLACEHOLDER = "..."
VERSION_LABEL = f"OfficeFlow v{__version__}"


class ProfileScreen(BaseScreen):
    """Represents the profile screen."""

    screen = Screen.PROFILE

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user: Optional[UserProfile] = None
        self.password_input = ""

    def mount(self) -> None:
        super().mount()
        self.user = self.context.session.load_profile()

    @property
    def profile_data(self) -> Dict[str, str]:
        """Display values with fallbacks for missing profile fields."""
        user = self.user or UserProfile()
        email_prefix = self.email.split("@")[0] if self.email else ""
        return {
            "name": user.full_name or email_prefix or "User",
            "email": user.email or self.email or "user@office.flow",
            "id": user.employee_id or PLACEHOLDER,
            "department": user.department or PLACEHOLDER,
            "designation": user.designation or PLACEHOLDER,
            "joined": user.created_at.strftime("%m/%d/%Y") if user.created_at else PLACEHOLDER,
        }

    def refresh_profile(self) -> bool:
        """Re-fetch the profile from the server with the session token."""
        session = self.context.session.current
        if session is None or not session.auth_token:
            logger.warning("[Profile] No auth token, cannot refresh profile")
            return False
        try:
            profile = self.context.api.get_profile(session.auth_token)
            self.context.session.update_profile(profile)
        except Exception as e:
            logger.error(f"[Profile] Refresh failed: {e}")
            self.alert("Refresh Failed", get_friendly_error_message(e, "Could not refresh your profile."))
            return False
        self.user = profile
        return True

    def start_reenrollment(self, password: Optional[str] = None) -> bool:
        """Open the scan screen to re-enroll the face, after asking for the password."""
        if password is not None:
            self.password_input = password
        if not self.password_input:
            self.alert("Required", "Please enter your password to continue.")
            return False

        verification_password = self.password_input
        self.password_input = ""
        self.navigate(
            Screen.ATTENDANCE_SCAN,
            email=self.email,
            intended_type=AttendanceType.UPDATE_FACE,
            verification_password=verification_password,
        )
        return True

    def logout(self) -> None:
        """Remove the stored session and go back to Login, even if cleanup fails."""
        try:
            self.context.session.clear()
        except Exception as e:
            logger.error(f"[Profile] Logout cleanup failed: {e}")
        finally:
            self.navigator.reset(Screen.LOGIN)
