#!/usr/bin/env python3
# src/base_mcp_server/protocol/session_manager.py
"""
MCP session lifecycle management.

Owns the map of live sessions, creates them on ``initialize``, routes each
message to its session's dispatcher, and retires sessions on explicit close
or idle eviction.

Concurrency:
    * The session map is guarded by a single ``threading.Lock``. Nothing awaits
      while it is held.
    * Requests within one session are serialized on the session's
      ``asyncio.Lock``; a second request queues behind the first.
    * Eviction skips sessions with a request queued or in flight.
"""

import asyncio
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..config import ServerConfig, default_session_id
from ..constants import KEY_METHOD, SWEEP_LOCK_TIMEOUT, McpMethod
from ..errors import MissingSessionError, SessionNotFoundError
from .dispatcher import DispatcherState, ProtocolDispatcher

logger = logging.getLogger(__name__)

_MAX_ID_ATTEMPTS = 100


class SessionState(Enum):
    INITIALIZING = "initializing"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(eq=False)
class Session:
    """One client session. Mutated only by the SessionManager."""

    id: str
    dispatcher: ProtocolDispatcher | None = field(repr=False)
    state: SessionState = SessionState.INITIALIZING
    created_at: float = field(default_factory=time.time)
    last_activity: float = field(default_factory=time.time)
    capabilities: dict[str, bool] = field(default_factory=lambda: {"tools": False, "resources": False})
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)
    pending: int = 0

    @property
    def is_live(self) -> bool:
        return self.state in (SessionState.INITIALIZING, SessionState.ACTIVE)

    @property
    def busy(self) -> bool:
        return self.pending > 0

    def touch(self, now: float | None = None) -> None:
        self.last_activity = time.time() if now is None else now


class SessionManager:
    """Manage MCP sessions."""

    def __init__(
        self,
        config: ServerConfig,
        dispatcher_factory: Callable[[str], ProtocolDispatcher],
        lock_timeout: float = SWEEP_LOCK_TIMEOUT,
    ):
        self.config = config
        self._dispatcher_factory = dispatcher_factory
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._sessions: dict[str, Session] = {}
        # Only custom generators need a history of retired ids; uuid4 ids do not repeat in practice
        self._track_retired = config.session_id_generator is not default_session_id
        self._retired: set[str] = set()
        self._sweeper: asyncio.Task[None] | None = None

    # ================================================================
    # Introspection
    # ================================================================

    @property
    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def is_retired(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._retired

    # ================================================================
    # Lifecycle
    # ================================================================

    def open_or_resume(self, session_id: str | None, *, initializing: bool = False) -> tuple[Session, bool]:
        """Return the live session for ``session_id``, creating one when allowed.

        Returns:
            ``(session, created)``.

        Raises:
            SessionNotFoundError: ``session_id`` is unknown, closed or evicted.
            MissingSessionError: no id, and neither initializing nor auto-creating.
        """
        return self._open(session_id, initializing=initializing, claim=False)

    def _open(self, session_id: str | None, *, initializing: bool, claim: bool) -> tuple[Session, bool]:
        with self._lock:
            if session_id is not None:
                session = self._sessions.get(session_id)
                if session is None or not session.is_live:
                    raise SessionNotFoundError(session_id)
                session.touch()
                if claim:
                    session.pending += 1
                return session, False

            if not (initializing or self.config.auto_create_sessions):
                raise MissingSessionError()

            new_id = self._generate_id()
            session = Session(id=new_id, dispatcher=self._dispatcher_factory(new_id))
            if claim:
                session.pending += 1
            self._sessions[new_id] = session

        logger.debug(f"Created session {new_id[:8]}...")
        return session, True

    def _generate_id(self) -> str:
        # Caller holds the map lock
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self.config.session_id_generator()
            if candidate and candidate not in self._sessions and candidate not in self._retired:
                return candidate
            logger.warning("Session id generator returned an id already in use; regenerating")
        raise RuntimeError(f"Could not generate a unique session id after {_MAX_ID_ATTEMPTS} attempts")

    async def dispatch(
        self, message: dict[str, Any], session_id: str | None
    ) -> tuple[dict[str, Any] | None, str | None]:
        """Route one validated envelope to its session's dispatcher.

        Returns:
            ``(response, new_session_id)``; the id is set only when this call
            created a session that survives it.

        Raises:
            SessionNotFoundError, MissingSessionError: see ``open_or_resume``.
        """
        initializing = message.get(KEY_METHOD) == McpMethod.INITIALIZE
        session, created = self._open(session_id, initializing=initializing, claim=True)

        try:
            async with session.lock:
                dispatcher = session.dispatcher
                if dispatcher is None:
                    # Closed while this request was queued
                    raise SessionNotFoundError(session.id)
                response = await dispatcher.handle(message)
                self._sync_state(session, dispatcher)
        finally:
            with self._lock:
                session.pending -= 1
                session.touch()

        if created and initializing and session.state is not SessionState.ACTIVE:
            self._discard(session, "failed initialize")
            return response, None
        if created and response is None:
            # A notification has no reply to carry the new id
            self._discard(session, "notification")
            return None, None
        return response, session.id if created else None

    def _sync_state(self, session: Session, dispatcher: ProtocolDispatcher) -> None:
        if session.state is SessionState.INITIALIZING and dispatcher.state is DispatcherState.ACTIVE:
            session.state = SessionState.ACTIVE
            session.capabilities = dict(dispatcher.capabilities)
            logger.debug(f"Session {session.id[:8]}... is active")

    def _discard(self, session: Session, reason: str) -> None:
        with self._lock:
            if self._sessions.get(session.id) is session:
                del self._sessions[session.id]
                self._retire(session)
        logger.debug(f"Discarded session {session.id[:8]}... after {reason}")

    def _retire(self, session: Session) -> None:
        # Caller holds the map lock
        session.state = SessionState.CLOSING
        if session.dispatcher is not None:
            session.dispatcher.close()
            session.dispatcher = None
        session.state = SessionState.CLOSED
        if self._track_retired:
            self._retired.add(session.id)

    def close(self, session_id: str) -> None:
        """Close a session and retire its id.

        Raises:
            SessionNotFoundError: unknown or already closed.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                raise SessionNotFoundError(session_id)
            self._retire(session)
        logger.debug(f"Closed session {session_id[:8]}...")

    def evict_idle(self, now: float | None = None) -> list[str]:
        """Evict sessions idle longer than ``idle_timeout``; busy sessions are skipped.

        Raises:
            TimeoutError: the map lock couldn't be acquired in time.
        """
        now = time.time() if now is None else now
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise TimeoutError(f"Could not acquire session map lock within {self._lock_timeout}s")
        try:
            expired = [
                session
                for session in self._sessions.values()
                if now - session.last_activity > self.config.idle_timeout and not session.busy
            ]
            for session in expired:
                del self._sessions[session.id]
                self._retire(session)
        finally:
            self._lock.release()

        evicted = [session.id for session in expired]
        for sid in evicted:
            logger.debug(f"Evicted idle session {sid[:8]}...")
        if evicted:
            logger.info(f"Evicted {len(evicted)} idle session(s)")
        return evicted

    # ================================================================
    # Background sweep
    # ================================================================

    def start_sweeper(self) -> asyncio.Task[None]:
        """Start the periodic idle sweep on the running loop (no-op if running)."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.create_task(self._sweep_loop(), name="mcp-session-sweeper")
            logger.debug(f"Session sweeper started (interval={self.config.sweep_interval}s)")
        return self._sweeper

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.sweep_interval)
            try:
                self.evict_idle()
            except TimeoutError as e:
                logger.warning(f"Session sweep skipped, retrying next tick: {e}")
            except Exception:
                logger.exception("Session sweep failed")

    async def stop_sweeper(self) -> None:
        task, self._sweeper = self._sweeper, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Session sweeper stopped")

    async def shutdown(self) -> None:
        """Stop the sweeper and close every live session."""
        await self.stop_sweeper()
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            for session in sessions:
                self._retire(session)
        logger.debug(f"Session manager shut down ({len(sessions)} session(s) closed)")


__all__ = ["Session", "SessionManager", "SessionState"]
