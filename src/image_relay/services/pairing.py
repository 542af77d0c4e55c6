"""In-memory registry bridging a phone upload into a desktop session."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from image_relay.domain.artifacts import StoredFile
from image_relay.domain.errors import InvalidRequestError, NotFoundError
from image_relay.domain.pairing import PairingSession, PairingStatus

logger = logging.getLogger(__name__)


@dataclass
class PairingRegistry:
    """Owns pairing sessions; each uploaded file is handed out at most once.

    Sessions live only in process memory. Without ``ttl_seconds`` an abandoned
    session stays until the process restarts.
    """

    ttl_seconds: int | None = None
    _sessions: dict[str, PairingSession] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def create(self) -> PairingSession:
        """Allocate a new session in the waiting state."""
        session = PairingSession(
            id=str(uuid4()),
            status=PairingStatus.WAITING,
            created_at=datetime.now(tz=UTC),
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Created pairing session %s", session.id)
        return session

    def exists(self, session_id: str) -> bool:
        with self._lock:
            return self._get(session_id) is not None

    def record_upload(self, session_id: str, file: StoredFile | None) -> PairingSession:
        """Attach the phone's upload to a waiting session."""
        with self._lock:
            session = self._require(session_id)
            if file is None:
                raise InvalidRequestError("No file was uploaded", message="No file.")
            if session.status is PairingStatus.UPLOADED:
                raise InvalidRequestError(
                    f"Session {session_id} already has an upload",
                    message="This session already received an image.",
                )
            session.status = PairingStatus.UPLOADED
            session.file = file
        logger.info("Recorded upload %s for session %s", file.stored_name, session_id)
        return session

    def poll_and_consume(self, session_id: str) -> PairingSession:
        """Return the session, removing it once its upload has been observed."""
        with self._lock:
            session = self._require(session_id)
            if session.status is PairingStatus.UPLOADED:
                del self._sessions[session_id]
                logger.info("Consumed pairing session %s", session_id)
            return session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _require(self, session_id: str) -> PairingSession:
        session = self._get(session_id)
        if session is None:
            raise NotFoundError(
                f"Session {session_id} not found", message="Session not found."
            )
        return session

    def _get(self, session_id: str) -> PairingSession | None:
        # Callers hold the lock.
        session = self._sessions.get(session_id)
        if session is None or self.ttl_seconds is None:
            return session
        expires_at = session.created_at + timedelta(seconds=self.ttl_seconds)
        if datetime.now(tz=UTC) >= expires_at:
            self._sessions.pop(session_id, None)
            logger.info("Evicted expired pairing session %s", session_id)
            return None
        return session
