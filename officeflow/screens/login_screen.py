"""
Login screen.
Signs the user in, persisting the session, and signs back in automatically
when credentials were saved by a previous session.
"""
import logging

from officeflow.error_messages import get_friendly_error_message
from officeflow.utils import mask_email
from .base_screen import BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)

LOGIN_FAILED_DEFAULT = "Check your internet and try again."


class LoginScreen(BaseScreen):
    """Represents the login screen."""

    screen = Screen.LOGIN

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.email_input = ""
        self.password_input = ""
        self.loading = False

    def mount(self) -> None:
        super().mount()
        if not self.params.get("auto_login", True):
            return
        saved = self.context.session.load_saved_credentials()
        if saved is None:
            return
        self.email_input, self.password_input = saved
        logger.info(f"[Login] Saved credentials found, signing in {mask_email(self.email_input)}")
        self.login()

    def fill(self, email: str, password: str) -> None:
        self.email_input = email
        self.password_input = password

    def login(self) -> bool:
        """
        Submit the form.

        Returns:
            True if the user was signed in and sent to Home
        """
        email = self.email_input.strip()
        password = self.password_input
        if not email or not password:
            self.alert("Error", "Please fill in all fields")
            return False

        self.loading = True
        try:
            device_id = self.context.device.get_device_id()
            data = self.context.api.login(email, password, device_id)
            self.context.session.save(email, password, data.access_token, data.user)
        except Exception as e:
            logger.error(f"[Login] Failed for {mask_email(email)}: {e}")
            self.alert("Login Failed", get_friendly_error_message(e, LOGIN_FAILED_DEFAULT))
            return False
        finally:
            self.loading = False

        self.navigate(Screen.HOME, email=email, token=data.access_token, user=data.user)
        return True

    def go_to_register(self) -> None:
        self.navigate(Screen.REGISTER)
