"""SessionState: the single mutable record shared by the controller and the orchestrator."""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .outcomes import Side


class SessionStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    HALTED = "halted"


@dataclass
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    active_side: Side = Side.WHITE
    in_flight: bool = False

    @property
    def running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    def begin(self) -> None:
        self.status = SessionStatus.RUNNING
        self.active_side = Side.WHITE
        self.in_flight = False

    def halt(self) -> None:
        self.status = SessionStatus.HALTED

    def set_active(self, side: Side) -> None:
        self.active_side = side

    @contextmanager
    def flight(self) -> Iterator[None]:
        """Hold the single-flight slot; released on every exit path, exceptions and cancellation included."""
        if self.in_flight:
            raise RuntimeError("a provider query is already in flight")
        self.in_flight = True
        try:
            yield
        finally:
            self.in_flight = False
