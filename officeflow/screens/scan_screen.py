"""
Attendance scan screen.
Wraps a CaptureOrchestrator and turns its outcomes into alerts.
"""
import logging
from typing import Optional

from officeflow.capture import CaptureOrchestrator, CaptureTimings, ScanState
from officeflow.models import AttendanceType, CaptureOutcome, OutcomeStatus
from officeflow.scheduling import ScheduledTask
from .base_screen import AlertAction, BaseScreen
from .navigation import Screen

logger = logging.getLogger(__name__)


class AttendanceScanScreen(BaseScreen):
    """Represents the face scan screen."""

    screen = Screen.ATTENDANCE_SCAN

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        intended = self.params.get("intended_type", AttendanceType.CHECK_IN)
        self.intended_type = AttendanceType(intended)
        self.timings = CaptureTimings.from_config(self.context.capture_config)
        self.last_outcome: Optional[CaptureOutcome] = None
        self.outcome_presented = False
        self._alert_task: Optional[ScheduledTask] = None
        self.orchestrator = CaptureOrchestrator(
            scheduler=self.context.scheduler,
            api=self.context.api,
            camera=self.context.camera,
            location=self.context.location,
            wifi=self.context.wifi,
            device=self.context.device,
            feedback=self.context.feedback,
            email=self.email,
            intended_type=self.intended_type,
            entry_location=self.params.get("location"),
            initial_wifi=self.params.get("wifi"),
            verification_password=self.params.get("verification_password"),
            presence_only=bool(self.params.get("presence_only")),
            timings=self.timings,
            on_outcome=self._handle_outcome,
        )

    @property
    def state(self) -> ScanState:
        return self.orchestrator.state

    def mount(self) -> None:
        super().mount()
        self.orchestrator.mount()
        self.orchestrator.camera_ready()

    def unmount(self) -> None:
        if self._alert_task:
            self._alert_task.cancel()
            self._alert_task = None
        self.orchestrator.unmount()
        super().unmount()

    def capture(self) -> bool:
        """Manual capture button."""
        return self.orchestrator.trigger_capture()

    def _handle_outcome(self, outcome: CaptureOutcome) -> None:
        self.last_outcome = outcome
        self.outcome_presented = False
        if self._alert_task:
            self._alert_task.cancel()
        immediate = (
            outcome.status == OutcomeStatus.REJECTED
            or (outcome.success and self.intended_type == AttendanceType.UPDATE_FACE)
        )
        if immediate:
            self._present(outcome)
        else:
            self._alert_task = self.context.scheduler.call_later(
                self.timings.result_alert_delay, self._present, outcome, name="result-alert",
            )

    def _present(self, outcome: CaptureOutcome) -> None:
        self._alert_task = None
        if outcome.success:
            actions = [AlertAction("Great!", self.return_home)]
        elif outcome.status == OutcomeStatus.ERROR:
            actions = [AlertAction("Retry", self.orchestrator.acknowledge_error)]
        else:
            actions = []
        self.alert(outcome.title, outcome.message, actions)
        self.outcome_presented = True

    def return_home(self) -> None:
        self.navigate(Screen.HOME, email=self.email)

    def wait_for_outcome(self, timeout: Optional[float] = None) -> Optional[CaptureOutcome]:
        """
        Run the scheduler until a result alert has been shown.

        Returns:
            The outcome, or None on timeout
        """
        finished = self.context.scheduler.run_until(lambda: self.outcome_presented, timeout)
        return self.last_outcome if finished else None
