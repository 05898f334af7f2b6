"""Session directory for the SSE transport.

A session is a live push stream registered under a caller-chosen id. The
directory maps ids to sessions and is mutated only when a stream opens or
closes, always from the event loop, so it needs no locking.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One open push stream.

    Outbound frames are queued here and drained by the stream generator.
    A ``None`` in the queue ends the stream.
    """

    id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    _queue: asyncio.Queue[str | None] = field(default_factory=asyncio.Queue, repr=False)
    _closed: bool = field(default=False, repr=False)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def push(self, frame: str) -> bool:
        """Queue a frame for the stream. Returns False if the session is closed."""
        if self._closed:
            return False
        self._queue.put_nowait(frame)
        return True

    def close(self) -> None:
        """Mark closed and wake the stream so it can finish."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    async def next_frame(self, timeout: float | None = None) -> str | None:
        """Wait for the next frame.

        Raises:
            TimeoutError: If nothing arrives within ``timeout`` seconds.
        """
        return await asyncio.wait_for(self._queue.get(), timeout=timeout)


class SessionDirectory:
    """Registry of open push-stream sessions keyed by session id.

    Duplicate ids: the newest open wins. The displaced session is closed,
    which ends its stream; its later teardown leaves the new registration
    untouched.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def open(self, session_id: str) -> Session:
        """Register a new session, evicting any live one with the same id."""
        session = Session(id=session_id)
        displaced = self._sessions.get(session_id)
        self._sessions[session_id] = session

        if displaced is not None:
            logger.info(f"Session {session_id} reopened; closing previous stream")
            displaced.close()

        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def close(self, session: Session) -> bool:
        """Tear down a session.

        Returns True if it was the registered session for its id.
        """
        session.close()
        if self._sessions.get(session.id) is session:
            del self._sessions[session.id]
            return True
        return False

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
