"""
Attendance capture orchestration for the scan screen.

Sequences the liveness simulation, the automatic capture, the local
security checks and the submission to the server. All timers run on the
injected Scheduler; the state machine guarantees at most one capture
attempt is in flight at any time.

State flow:
    idle -> checking -> ready -> verifying -> success
                          ^          |
                          |          +-> error -> (retry) -> ready
                          +--- local rejection (mock/no fix)
"""
import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from officeflow.api import AttendanceApiClient
from officeflow.error_messages import get_friendly_error_message
from officeflow.errors import LocationUnavailableError, MockLocationError, PreconditionError
from officeflow.models import (
    AttendanceSubmission,
    AttendanceType,
    CaptureOutcome,
    LocationAccuracy,
    LocationReading,
    OutcomeStatus,
    UNKNOWN_WIFI_STRENGTH,
    WifiState,
)
from officeflow.scheduling import ScheduledTask, Scheduler
from officeflow.sensors import Camera, DeviceIdentity, Feedback, LocationProvider, WifiReader
from officeflow.utils import LOCATING_ADDRESS, format_address, mask_email

logger = logging.getLogger(__name__)

VERIFICATION_FAILED_MESSAGE = "Attendance verification failed."
MOCK_LOCATION_TITLE = "Security Alert"
MOCK_LOCATION_MESSAGE = "Attendance cannot be marked using mock locations / GPS spoofing apps."
NO_FIX_TITLE = "Location Error"
NO_FIX_MESSAGE = (
    "Could not get a precise location. Please ensure GPS is on and you are not "
    "indoors with poor satellite reception."
)
FAILURE_TITLE = "Attendance Notice"
CHECK_IN_TITLE = "✨ Welcome Aboard!"
CHECK_OUT_TITLE = "👋 See You Soon!"
FACE_UPDATED_TITLE = "✨ Biometrics Updated"
PRESENCE_VERIFIED_TITLE = "✅ Presence Verified"


class ScanState(str, enum.Enum):
    IDLE = "idle"
    CHECKING = "checking"
    READY = "ready"
    VERIFYING = "verifying"
    SUCCESS = "success"
    ERROR = "error"


# States in which a new capture attempt may start
TRIGGERABLE_STATES = (ScanState.READY, ScanState.ERROR)


@dataclass
class CaptureTimings:
    """Timer settings of the scan screen, in seconds."""
    liveness_increment: float = 0.05
    liveness_interval: float = 0.1
    settle_delay: float = 0.8
    location_poll_interval: float = 5.0
    wifi_poll_interval: float = 2.0
    result_alert_delay: float = 0.5

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "CaptureTimings":
        return cls(**{k: v for k, v in config.items() if k in cls.__dataclass_fields__})

    @property
    def liveness_ticks(self) -> int:
        """Ticks needed for progress to reach 1 (20 with the defaults)."""
        return max(1, math.ceil(round(1 / self.liveness_increment, 9)))


class CaptureOrchestrator:
    """
    Drives one visit to the scan screen.

    Args:
        scheduler: Scheduler that owns every timer of this screen
        api: Attendance server client
        camera: Front camera adapter
        location: Location adapter
        wifi: WiFi adapter
        device: Device identity adapter
        feedback: Haptic feedback adapter
        email: Signed-in user
        intended_type: check-in, check-out or update-face
        entry_location: Location reading taken when the screen was opened
        initial_wifi: WiFi snapshot taken when the screen was opened
        verification_password: Password re-entered for update-face
        presence_only: Only verify presence, nothing is recorded
        timings: Timer settings
        on_outcome: Called once per finished attempt with a CaptureOutcome
        on_state_change: Called with (old_state, new_state)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        api: AttendanceApiClient,
        camera: Camera,
        location: LocationProvider,
        wifi: WifiReader,
        device: DeviceIdentity,
        feedback: Feedback,
        email: str,
        intended_type: AttendanceType = AttendanceType.CHECK_IN,
        entry_location: Optional[LocationReading] = None,
        initial_wifi: Optional[WifiState] = None,
        verification_password: Optional[str] = None,
        presence_only: bool = False,
        timings: Optional[CaptureTimings] = None,
        on_outcome: Optional[Callable[[CaptureOutcome], None]] = None,
        on_state_change: Optional[Callable[[ScanState, ScanState], None]] = None,
    ):
        self.scheduler = scheduler
        self.api = api
        self.camera = camera
        self.location = location
        self.wifi = wifi
        self.device = device
        self.feedback = feedback
        self.email = email
        self.intended_type = intended_type
        self.entry_location = entry_location
        self.verification_password = verification_password
        self.presence_only = presence_only
        self.timings = timings or CaptureTimings()
        self.on_outcome = on_outcome
        self.on_state_change = on_state_change

        self.state = ScanState.IDLE
        self.address = LOCATING_ADDRESS
        self.live_wifi = initial_wifi or WifiState()
        self.outcomes: List[CaptureOutcome] = []
        self.submission_count = 0
        self.mounted = False

        self._ticks = 0
        self._tasks: List[ScheduledTask] = []
        self._liveness_task: Optional[ScheduledTask] = None

    @property
    def progress(self) -> float:
        """Liveness progress between 0 and 1."""
        return min(1.0, self._ticks * self.timings.liveness_increment)

    @property
    def in_flight(self) -> bool:
        return self.state == ScanState.VERIFYING

    def _set_state(self, new_state: ScanState) -> None:
        old_state = self.state
        if old_state == new_state:
            return
        self.state = new_state
        logger.debug(f"[Scan] {old_state.value} -> {new_state.value}")
        if self.on_state_change:
            self.on_state_change(old_state, new_state)

    def _track(self, task: ScheduledTask) -> ScheduledTask:
        self._tasks = [t for t in self._tasks if t.active]
        self._tasks.append(task)
        return task

    # Lifecycle

    def mount(self) -> None:
        """Start the background location and WiFi pollers."""
        if self.mounted:
            return
        self.mounted = True
        logger.info(f"[Scan] Opened for {mask_email(self.email)} ({self.intended_type.value})")
        self._track(self.scheduler.call_every(
            self.timings.location_poll_interval, self.refresh_address,
            name="location-poller", immediate=True,
        ))
        self._track(self.scheduler.call_every(
            self.timings.wifi_poll_interval, self.refresh_wifi, name="wifi-poller",
        ))

    def unmount(self) -> None:
        """Cancel every timer and poller this screen started."""
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        self._liveness_task = None
        self.mounted = False
        logger.debug("[Scan] Closed, all timers cancelled")

    @property
    def active_tasks(self) -> List[ScheduledTask]:
        return [t for t in self._tasks if t.active]

    # Liveness and auto-capture

    def camera_ready(self) -> None:
        """The camera preview is up; start the liveness simulation."""
        if self.state != ScanState.IDLE:
            return
        self._ticks = 0
        self._set_state(ScanState.CHECKING)
        self._liveness_task = self._track(self.scheduler.call_every(
            self.timings.liveness_interval, self._liveness_tick, name="liveness",
        ))

    def _liveness_tick(self) -> None:
        self._ticks += 1
        if self._ticks < self.timings.liveness_ticks:
            return
        if self._liveness_task:
            self._liveness_task.cancel()
            self._liveness_task = None
        self._set_state(ScanState.READY)
        self.feedback.notify(Feedback.SUCCESS)
        self._track(self.scheduler.call_later(
            self.timings.settle_delay, self._auto_capture, name="auto-capture",
        ))

    def _auto_capture(self) -> None:
        if self.state == ScanState.READY:
            self.trigger_capture()

    def trigger_capture(self) -> bool:
        """
        Request one capture-and-submit attempt.

        Returns:
            True if the attempt was queued, False if it was ignored because
            another attempt is in flight or the scan is not ready
        """
        if self.state not in TRIGGERABLE_STATES:
            logger.debug(f"[Scan] Capture ignored in state {self.state.value}")
            return False
        self._set_state(ScanState.VERIFYING)
        self._track(self.scheduler.call_soon(self._run_attempt, name="capture-attempt"))
        return True

    def acknowledge_error(self) -> None:
        """The user dismissed a failure with Retry."""
        if self.state == ScanState.ERROR:
            self._set_state(ScanState.READY)

    # Attempt

    def _run_attempt(self) -> None:
        try:
            outcome = self._capture_and_submit()
        except PreconditionError as e:
            logger.warning(f"[Scan] Capture rejected locally: {e}")
            self.feedback.notify(Feedback.ERROR)
            title = MOCK_LOCATION_TITLE if isinstance(e, MockLocationError) else NO_FIX_TITLE
            outcome = CaptureOutcome(
                status=OutcomeStatus.REJECTED,
                title=title,
                message=str(e),
                intended_type=self.intended_type,
                error=str(e),
            )
            self._set_state(ScanState.READY)
        except Exception as e:
            logger.error(f"[Scan] Verification failed: {e}", exc_info=True)
            self.feedback.notify(Feedback.ERROR)
            outcome = CaptureOutcome(
                status=OutcomeStatus.ERROR,
                title=FAILURE_TITLE,
                message=get_friendly_error_message(e, VERIFICATION_FAILED_MESSAGE),
                intended_type=self.intended_type,
                error=str(e),
            )
            self._set_state(ScanState.ERROR)
        else:
            self.feedback.notify(Feedback.SUCCESS)
            self._set_state(ScanState.SUCCESS)

        self.outcomes.append(outcome)
        if self.on_outcome:
            self.on_outcome(outcome)

    def _capture_and_submit(self) -> CaptureOutcome:
        picture = self.camera.take_picture()

        if self.entry_location is not None and self.entry_location.mocked:
            raise MockLocationError(MOCK_LOCATION_MESSAGE)

        fresh = self.location.get_current_position(LocationAccuracy.BEST_FOR_NAVIGATION)
        if fresh is None or fresh.is_null_fix:
            raise LocationUnavailableError(NO_FIX_MESSAGE)
        if fresh.mocked:
            raise MockLocationError(MOCK_LOCATION_MESSAGE)

        device_id = self.device.get_device_id()
        submission = AttendanceSubmission(
            email=self.email,
            face_image=picture,
            latitude=fresh.latitude,
            longitude=fresh.longitude,
            intended_type=self.intended_type,
            device_id=device_id,
            wifi_bssid=self.live_wifi.bssid,
            wifi_ssid=self.live_wifi.ssid,
            wifi_strength=self.live_wifi.strength,
            address=self.address,
        )

        self.submission_count += 1
        if self.intended_type == AttendanceType.UPDATE_FACE:
            result = self.api.update_face(submission, self.verification_password or "")
            logger.info(f"[Scan] Face biometrics updated for {mask_email(self.email)}")
            return CaptureOutcome(
                status=OutcomeStatus.SUCCESS,
                title=FACE_UPDATED_TITLE,
                message=result.message,
                intended_type=self.intended_type,
                result=result,
            )

        if self.presence_only:
            result = self.api.verify_presence(submission)
            logger.info(f"[Scan] Presence verified for {mask_email(self.email)}")
            return CaptureOutcome(
                status=OutcomeStatus.SUCCESS,
                title=PRESENCE_VERIFIED_TITLE,
                message=f"Presence verified for {result.user}.\n(WiFi Quality: {result.wifi_quality})",
                intended_type=self.intended_type,
                result=result,
            )

        result = self.api.smart_attendance(submission)
        action = "Check-in" if result.is_check_in else "Check-out"
        logger.info(f"[Scan] {action} recorded for {mask_email(self.email)}")
        return CaptureOutcome(
            status=OutcomeStatus.SUCCESS,
            title=CHECK_IN_TITLE if result.is_check_in else CHECK_OUT_TITLE,
            message=f"{action} successful for {result.user}.\n(WiFi Quality: {result.wifi_quality})",
            intended_type=self.intended_type,
            result=result,
        )

    # Pollers

    def refresh_address(self) -> None:
        """Re-resolve the readable address from a balanced-accuracy fix."""
        try:
            reading = self.location.get_current_position(LocationAccuracy.BALANCED)
            if reading is None:
                return
            places = self.location.reverse_geocode(reading.latitude, reading.longitude)
            if not places:
                return
            self.address = format_address(places)
            logger.debug(f"[Scan] Address: {self.address}")
        except Exception as e:
            logger.warning(f"[Scan] Address update failed: {e}")

    def refresh_wifi(self) -> None:
        """Update the WiFi snapshot used by the next submission."""
        try:
            state = self.wifi.fetch()
        except Exception as e:
            logger.warning(f"[Scan] Live WiFi update failed: {e}")
            return
        if not state.connected:
            return
        self.live_wifi = WifiState(
            connected=True,
            ssid=state.ssid or self.live_wifi.ssid,
            bssid=state.bssid or self.live_wifi.bssid,
            strength=state.strength or UNKNOWN_WIFI_STRENGTH,
        )
