"""
Registration: the details form followed by face enrollment (onboarding).
"""
import logging
from typing import Dict, Optional

from officeflow.error_messages import get_friendly_error_message
from officeflow.errors import ValidationError
from officeflow.utils import mask_email
from .base_screen import AlertAction, BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)

REGISTRATION_FIELDS = (
    "full_name",
    "email",
    "password",
    "employee_id",
    "designation",
    "department",
)
ENROLLMENT_FAILED_DEFAULT = "Could not complete enrollment."


class RegisterScreen(BaseScreen):
    """Collects the employee details."""

    screen = Screen.REGISTER

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields: Dict[str, str] = {name: "" for name in REGISTRATION_FIELDS}

    def fill(self, **values: str) -> None:
        for name, value in values.items():
            if name not in self.fields:
                raise KeyError(f"Unknown registration field {name!r}")
            self.fields[name] = value

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If any detail is blank
        """
        missing = [name for name, value in self.fields.items() if not value.strip()]
        if missing:
            raise ValidationError(f"Missing registration fields: {', '.join(missing)}")

    def proceed(self) -> bool:
        """Continue to face enrollment once every field is filled in."""
        try:
            self.validate()
        except ValidationError as e:
            logger.warning(f"[Register] {e}")
            self.alert("Missing Fields", "Please fill in all details before continuing.")
            return False
        self.navigate(Screen.ONBOARDING, **self.fields)
        return True

    def go_to_login(self) -> None:
        self.navigate(Screen.LOGIN)


class OnboardingScreen(BaseScreen):
    """Captures the face photo and creates the account."""

    screen = Screen.ONBOARDING

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.photo: Optional[str] = None
        self.loading = False

    def capture(self) -> bool:
        try:
            self.photo = self.context.camera.take_picture()
        except Exception as e:
            logger.error(f"[Onboarding] Capture failed: {e}")
            self.alert("Error", f"Failed to capture image: {e}")
            return False
        return True

    def retake(self) -> None:
        self.photo = None

    def register(self) -> bool:
        if not self.photo:
            self.alert("Error", "Please capture your face first.")
            return False

        email = self.params.get("email", "")
        password = self.params.get("password", "")
        self.loading = True
        try:
            data = self.context.api.register(
                full_name=self.params.get("full_name", ""),
                email=email,
                password=password,
                employee_id=self.params.get("employee_id", ""),
                designation=self.params.get("designation", ""),
                department=self.params.get("department", ""),
                face_image=self.photo,
                device_id=self.context.device.get_device_id(),
            )
            self.context.session.save(email, password, data.access_token, data.user)
        except Exception as e:
            logger.error(f"[Onboarding] Registration failed for {mask_email(email)}: {e}")
            self.alert("Registration Failed", get_friendly_error_message(e, ENROLLMENT_FAILED_DEFAULT))
            return False
        finally:
            self.loading = False

        logger.info(f"[Onboarding] Digital ID created for {mask_email(email)}")
        self.alert("Success", "Digital ID Created Successfully!", [
            AlertAction("Start Working", lambda: self.navigate(
                Screen.HOME, email=email, token=data.access_token, user=data.user,
            )),
        ])
        return True
