import logging
import secrets
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, Optional

from ..errors import InvalidSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Session data structure"""
    token: str = field(repr=False)
    username: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class SessionModule:
    def __init__(
        self,
        default_ttl: Optional[int] = None,
        single_session: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize session module.

        Args:
            default_ttl: Session lifetime in seconds, None for no expiry
            single_session: Revoke a user's other sessions on each new login
            clock: Returns the current UTC time, injectable for tests
        """
        self.default_ttl = default_ttl
        self.single_session = single_session
        self._clock = clock or (lambda: datetime.now(UTC))

        # token -> session, one lock for the whole table
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(self, username: str) -> Session:
        """
        Create a new login session.

        Args:
            username: Owner of the session

        Returns:
            The new Session; its token is 256 bits from the OS CSPRNG
        """
        now = self._clock()
        expires_at = now + timedelta(seconds=self.default_ttl) if self.default_ttl else None

        session = Session(
            token=secrets.token_urlsafe(32),
            username=username,
            created_at=now,
            expires_at=expires_at,
        )

        with self._lock:
            if self.single_session:
                replaced = self._drop_user_sessions(username)
                if replaced:
                    logger.info(f"Revoked {replaced} earlier session(s) for {username}")
            self._sessions[session.token] = session

        logger.debug(f"Session created for {username}")
        return session

    def validate(self, token: str) -> str:
        """
        Return the username owning an active session.

        Raises:
            InvalidSession: token unknown, revoked or expired
        """
        if not token:
            raise InvalidSession()

        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                raise InvalidSession()
            if session.is_expired(now):
                del self._sessions[token]
                raise InvalidSession()
            return session.username

    def revoke(self, token: str) -> None:
        """End a session. Unknown and already revoked tokens are ignored."""
        if not token:
            return

        with self._lock:
            session = self._sessions.pop(token, None)

        if session:
            logger.info(f"Session ended for {session.username}")

    def revoke_user(self, username: str) -> int:
        """End every session of a user, returning how many were removed."""
        with self._lock:
            return self._drop_user_sessions(username)

    def cleanup_expired(self) -> int:
        """
        Remove expired sessions from the table.

        Validation already expires sessions lazily; this only reclaims
        memory for tokens nobody presents again.

        Returns:
            Number of sessions cleaned up
        """
        now = self._clock()
        with self._lock:
            expired = [token for token, session in self._sessions.items() if session.is_expired(now)]
            for token in expired:
                del self._sessions[token]

        if expired:
            logger.debug(f"Cleaned up {len(expired)} expired session(s)")
        return len(expired)

    def active_count(self) -> int:
        """Get count of stored sessions, expired ones included until swept"""
        with self._lock:
            return len(self._sessions)

    def _drop_user_sessions(self, username: str) -> int:
        """Caller must hold the lock."""
        tokens = [token for token, session in self._sessions.items() if session.username == username]
        for token in tokens:
            del self._sessions[token]
        return len(tokens)
