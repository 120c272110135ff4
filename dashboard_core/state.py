from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from dashboard_core.errors import FlowBusyError, user_message

logger = logging.getLogger(__name__)


class FlowStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class FlowState:
    """Request-scoped UI state for one flow (analytics load, prompt submit).

    idle -> loading -> success | error; ``dismiss`` returns to idle.
    """

    name: str
    status: FlowStatus = FlowStatus.IDLE
    result: Any = None
    error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.status is FlowStatus.LOADING

    def start(self) -> None:
        if self.busy:
            raise FlowBusyError(f"{self.name} is already in progress")
        self.status = FlowStatus.LOADING
        self.result = None
        self.error = None

    def succeed(self, result: Any) -> None:
        self.status = FlowStatus.SUCCESS
        self.result = result
        self.error = None

    def fail(self, message: str) -> None:
        self.status = FlowStatus.ERROR
        self.result = None
        self.error = message

    def dismiss(self) -> None:
        self.status = FlowStatus.IDLE
        self.result = None
        self.error = None

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        self.start()
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            logger.exception("%s failed", self.name)
            self.fail(user_message(exc))
            return None
        self.succeed(result)
        return result
