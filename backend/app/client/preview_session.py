# app/client/preview_session.py
"""
Preview session controller for section edit views.

Drives the sandboxed preview frame of one section: get a token, point the
frame at the external renderer, and give up after a fixed timeout if the
renderer never answers. Runs on a single event loop; frame callbacks and
the timeout race, and whichever lands first wins.

The scheduler only needs ``call_later(delay, callback)`` returning a handle
with ``cancel()``, which an asyncio event loop provides.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

from app.application.preview.frame import SANDBOX_POLICY, build_preview_url
from app.utils.clock import normalize_ts, utc_now

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

IDLE = "idle"
LOADING = "loading"
LOADED = "loaded"
UNAVAILABLE = "unavailable"

# Why a preview is unavailable (the editor sees one message for all)
CAUSE_TIMEOUT = "timeout"
CAUSE_FRAME_ERROR = "frame_error"
CAUSE_TOKEN_ERROR = "token_error"
CAUSE_BAD_URL = "bad_url"


class TimerHandle(Protocol):
    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        ...


class IssuedTokenLike(Protocol):
    token: str
    expires_at: datetime


TokenProvider = Callable[[str, str, str], IssuedTokenLike]


@dataclass(frozen=True)
class PreviewTarget:
    org_id: str
    page_id: str
    section_id: str
    page_slug: str
    section_key: str


@dataclass(frozen=True)
class PreviewFrame:
    src: str
    sandbox: str
    generation: int


class PreviewSession:
    def __init__(
        self,
        *,
        base_url: str,
        token_provider: TokenProvider,
        scheduler: Scheduler,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now,
        on_change: Optional[Callable[["PreviewSession"], None]] = None,
    ):
        self.base_url = base_url
        self.token_provider = token_provider
        self.scheduler = scheduler
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.on_change = on_change

        self.state = IDLE
        self.cause: Optional[str] = None
        self.target: Optional[PreviewTarget] = None
        self.frame: Optional[PreviewFrame] = None

        self._token: Optional[IssuedTokenLike] = None
        self._timer: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def is_unavailable(self) -> bool:
        return self.state == UNAVAILABLE

    @property
    def token(self) -> Optional[str]:
        return self._token.token if self._token else None

    def open(self, target: PreviewTarget) -> None:
        """Enter the edit view of a section (or switch to another one)."""
        if self.target is not None:
            self.close()

        self.target = target
        self._token = None
        self._load()

    def saved(self) -> None:
        """
        Draft content was saved: reload the frame so it shows the new draft.
        The current token is reused unless it has expired.
        """
        if self.target is None:
            raise RuntimeError("No section is being previewed")
        self._load()

    def close(self) -> None:
        """Leave the edit view; late frame or timer callbacks are ignored."""
        self._cancel_timer()
        self._generation += 1
        self.target = None
        self.frame = None
        self._token = None
        self._set_state(IDLE, None)

    def frame_loaded(self, generation: Optional[int] = None) -> bool:
        if not self._accepts(generation):
            return False

        self._cancel_timer()
        self._set_state(LOADED, None)
        return True

    def frame_failed(self, generation: Optional[int] = None) -> bool:
        """An explicit load error; no need to wait out the timeout."""
        if not self._accepts(generation):
            return False

        self._cancel_timer()
        logger.warning(f"Preview frame failed to load for section {self.target.section_key}")
        self._set_state(UNAVAILABLE, CAUSE_FRAME_ERROR)
        return True

    def _load(self) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        target = self.target

        try:
            token = self._ensure_token(target)
        except Exception as exc:
            logger.warning(f"Could not get a preview token for section {target.section_key}: {exc}")
            self.frame = None
            self._set_state(UNAVAILABLE, CAUSE_TOKEN_ERROR)
            return

        try:
            src = build_preview_url(self.base_url, target.page_slug, target.section_key, token)
        except ValueError as exc:
            logger.warning(f"Cannot build preview address for section {target.section_key}: {exc}")
            self.frame = None
            self._set_state(UNAVAILABLE, CAUSE_BAD_URL)
            return

        self.frame = PreviewFrame(src=src, sandbox=SANDBOX_POLICY, generation=generation)
        self._set_state(LOADING, None)
        self._timer = self.scheduler.call_later(self.timeout_seconds, self._timed_out, generation)

    def _ensure_token(self, target: PreviewTarget) -> str:
        if self._token is None or normalize_ts(self._token.expires_at) <= self.clock():
            self._token = self.token_provider(target.org_id, target.page_id, target.section_id)
        return self._token.token

    def _timed_out(self, generation: int) -> None:
        if generation != self._generation or self.state != LOADING:
            return

        self._timer = None
        logger.warning(
            f"Preview renderer did not answer within {self.timeout_seconds}s "
            f"for section {self.target.section_key}"
        )
        self._set_state(UNAVAILABLE, CAUSE_TIMEOUT)

    def _accepts(self, generation: Optional[int]) -> bool:
        if self.state != LOADING:
            return False
        return generation is None or generation == self._generation

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set_state(self, state: str, cause: Optional[str]) -> None:
        changed = (state, cause) != (self.state, self.cause)
        self.state = state
        self.cause = cause
        if changed and self.on_change is not None:
            self.on_change(self)
