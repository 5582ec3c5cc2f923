"""
Stack navigation between screens.

Navigating to a screen already on the stack pops back to it instead of
pushing a duplicate. Every popped screen is unmounted, which is what stops
the scan screen's timers.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .base_screen import BaseScreen

logger = logging.getLogger(__name__)


class Screen(str, enum.Enum):
    LOGIN = "Login"
    REGISTER = "Register"
    ONBOARDING = "Onboarding"
    HOME = "Home"
    ATTENDANCE_SCAN = "AttendanceScan"
    HISTORY = "History"
    PROFILE = "Profile"


@dataclass
class Route:
    screen: Screen
    instance: BaseScreen


ScreenFactory = Callable[[Screen, "Navigator", Dict[str, Any]], BaseScreen]


class Navigator:
    """
    Owns the route stack.

    Args:
        factory: Builds the screen instance for a route
    """

    def __init__(self, factory: ScreenFactory):
        self.factory = factory
        self.stack: List[Route] = []

    @property
    def current(self) -> Optional[BaseScreen]:
        return self.stack[-1].instance if self.stack else None

    @property
    def current_screen(self) -> Optional[Screen]:
        return self.stack[-1].screen if self.stack else None

    def history(self) -> List[Screen]:
        return [route.screen for route in self.stack]

    def _index_of(self, screen: Screen) -> Optional[int]:
        for index, route in enumerate(self.stack):
            if route.screen == screen:
                return index
        return None

    def _pop_to(self, index: int) -> None:
        while len(self.stack) > index + 1:
            route = self.stack.pop()
            logger.debug(f"[Nav] Unmounting {route.screen.value}")
            route.instance.unmount()

    def navigate(self, screen: Screen, **params: Any) -> BaseScreen:
        """Go to screen, reusing it if it is already on the stack."""
        index = self._index_of(screen)
        if index is not None:
            self._pop_to(index)
            instance = self.stack[index].instance
            logger.info(f"[Nav] Back to {screen.value}")
            instance.focus(params)
            return instance

        instance = self.factory(screen, self, params)
        self.stack.append(Route(screen=screen, instance=instance))
        logger.info(f"[Nav] Open {screen.value}")
        instance.mount()
        return instance

    def go_back(self) -> Optional[BaseScreen]:
        if len(self.stack) < 2:
            return self.current
        self._pop_to(len(self.stack) - 2)
        instance = self.stack[-1].instance
        instance.focus()
        return instance

    def reset(self, screen: Screen, **params: Any) -> BaseScreen:
        """Drop the whole stack and start over at screen."""
        self._pop_to(-1)
        return self.navigate(screen, **params)

    def clear(self) -> None:
        """Unmount every screen."""
        self._pop_to(-1)
