"""Application state shared by every view of an analysis.

The store has one writer (the orchestrator) and any number of readers.
Writes are tagged with the run id they belong to; writes from a run that is
no longer the latest are dropped so a slow earlier run cannot overwrite the
result of a newer one.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from skillx.clients.gateway import ErrorKind, classify_error
from skillx.models.roadmap import Roadmap
from skillx.models.skills import SkillAnalysisItem

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "General Growth Project"

FAILURE_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.RATE_LIMITED: (
        "API Quota Exceeded: The intelligence engine is currently at capacity. "
        "Please try again in a few minutes or check your billing plan."
    ),
    ErrorKind.TIMEOUT: "The intelligence engine did not respond in time. Please try again.",
    ErrorKind.DECODE: "The intelligence engine returned an unreadable response. Please try again.",
    ErrorKind.UNEXPECTED: "An unexpected error occurred during analysis. Please try again.",
}


class RunState(str, Enum):
    IDLE = "idle"
    EXTRACTING_SKILLS = "extracting_skills"
    ANALYZING = "analyzing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisBundle:
    """Everything one successful analysis run produced."""

    skills: list[str]
    analysis: list[SkillAnalysisItem]
    match_score: float
    roadmap: Roadmap
    run_id: int
    elapsed_seconds: float = 0.0


@dataclass(frozen=True)
class AnalysisFailure:
    kind: ErrorKind
    message: str  # user-facing guidance
    detail: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> AnalysisFailure:
        kind = classify_error(exc)
        return cls(kind=kind, message=FAILURE_MESSAGES[kind], detail=str(exc))

    @property
    def retry_later(self) -> bool:
        return self.kind is ErrorKind.RATE_LIMITED


Listener = Callable[["AnalysisStore"], None]


@dataclass
class AnalysisStore:
    state: RunState = RunState.IDLE
    bundle: AnalysisBundle | None = None
    failure: AnalysisFailure | None = None
    latest_run_id: int = 0
    _listeners: list[Listener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every accepted change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin_run(self) -> int:
        """Start a new run, discarding the previous result."""
        self.latest_run_id += 1
        self.state = RunState.EXTRACTING_SKILLS
        self.bundle = None
        self.failure = None
        self._notify()
        return self.latest_run_id

    def is_current(self, run_id: int) -> bool:
        return run_id == self.latest_run_id

    def advance(self, run_id: int, state: RunState) -> bool:
        if not self._accept(run_id, f"state {state.value}"):
            return False
        self.state = state
        self._notify()
        return True

    def publish(self, run_id: int, bundle: AnalysisBundle) -> bool:
        """Replace the current bundle wholesale; never merges."""
        if not self._accept(run_id, "bundle"):
            return False
        self.bundle = bundle
        self.failure = None
        self.state = RunState.SUCCEEDED
        self._notify()
        return True

    def fail(self, run_id: int, failure: AnalysisFailure) -> bool:
        if not self._accept(run_id, "failure"):
            return False
        self.bundle = None
        self.failure = failure
        self.state = RunState.FAILED
        self._notify()
        return True

    # --- read-side conveniences for views ---

    @property
    def skills(self) -> list[str]:
        return list(self.bundle.skills) if self.bundle else []

    @property
    def match_score(self) -> float:
        return self.bundle.match_score if self.bundle else 0

    @property
    def roadmap(self) -> Roadmap | None:
        return self.bundle.roadmap if self.bundle else None

    @property
    def project_name(self) -> str:
        if self.bundle and self.bundle.roadmap.project_name:
            return self.bundle.roadmap.project_name
        return DEFAULT_PROJECT_NAME

    def _accept(self, run_id: int, what: str) -> bool:
        if self.is_current(run_id):
            return True
        logger.info("Discarding %s from stale run %d (latest is %d)", what, run_id, self.latest_run_id)
        return False

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
