"""Single-flight guard and status tracking for user-triggered actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, TypeVar

from garment_catalog.catalog.models import utcnow
from garment_catalog.errors import ActionInProgress, CatalogError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActionStatus(str, Enum):
    """Lifecycle of one action kind."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class ActionState:
    status: ActionStatus = ActionStatus.IDLE
    result: Any = None
    message: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None


class SingleFlightAction(Generic[T]):
    """Runs at most one call of an action at a time.

    A second ``run`` while one is in flight raises :class:`ActionInProgress`
    without invoking its factory. A running call is never cancelled; its
    outcome always replaces the previous state.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._state = ActionState()

    @property
    def state(self) -> ActionState:
        return replace(self._state)

    @property
    def running(self) -> bool:
        return self._state.status is ActionStatus.RUNNING

    async def run(self, factory: Callable[[], Awaitable[T]]) -> T:
        if self.running:
            logger.info("Rejected %s: previous call still running", self.name)
            raise ActionInProgress()

        self._state = ActionState(status=ActionStatus.RUNNING, started_at=utcnow())
        started_at = self._state.started_at
        try:
            result = await factory()
        except Exception as exc:
            message = exc.message if isinstance(exc, CatalogError) else CatalogError.default_message
            logger.warning("Action %s failed: %s", self.name, exc)
            self._state = ActionState(
                status=ActionStatus.FAILED,
                message=message,
                started_at=started_at,
                finished_at=utcnow(),
            )
            raise
        except BaseException:
            # Cancelled from outside; do not leave the action stuck in running.
            self._state = ActionState(
                status=ActionStatus.FAILED,
                message=CatalogError.default_message,
                started_at=started_at,
                finished_at=utcnow(),
            )
            raise

        self._state = ActionState(
            status=ActionStatus.SUCCEEDED,
            result=result,
            started_at=started_at,
            finished_at=utcnow(),
        )
        return result

    def reset(self) -> None:
        """Return to ``idle`` unless a call is in flight."""

        if not self.running:
            self._state = ActionState()


__all__ = ["ActionState", "ActionStatus", "SingleFlightAction"]
