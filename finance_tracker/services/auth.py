"""
Mock Authentication Service

WARNING: This is a placeholder, NOT a security boundary.
- Credentials are stored in plaintext and compared by equality
- The signing key is a fixed literal shared by encode and decode
- The user registry lives in memory and is lost when the process exits

What it does provide:
1. A registry of users with unique emails
2. A signed session token (JWT) embedding the user and a millisecond expiry
3. A cached copy of the active user under the "user" cookie

Failures (duplicate email, wrong credentials, missing/expired/malformed
token) surface as None / False, never as exceptions.
"""

from typing import Iterable, Optional

from jose import JWTError, jwt
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.config import AuthSettings, StorageSettings, get_settings
from finance_tracker.models.user import PublicUser, SessionPayload, User
from finance_tracker.services.clock import Clock, now_ms, system_clock, timestamp_id
from finance_tracker.services.storage import CorruptDataError, KeyValueStoreInterface


class AuthService:
    """
    In-memory user registry plus token-backed session.

    The session itself is nothing but the token in the key-value store;
    every check decodes it again.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        settings: Optional[AuthSettings] = None,
        storage_settings: Optional[StorageSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Clock = system_clock,
        users: Optional[Iterable[User]] = None,
    ):
        """
        Initialize the auth service.

        Args:
            store: Where the token and cached user are kept
            settings: Signing and TTL settings (defaults to global settings)
            storage_settings: Key names and cookie lifetime
            audit_logger: Optional audit sink
            clock: Epoch-seconds clock, injectable for tests
            users: Initial registry contents
        """
        self._store = store
        self._settings = settings or get_settings().auth
        self._storage_settings = storage_settings or get_settings().storage
        self._audit_logger = audit_logger
        self._clock = clock
        self._users: list[User] = list(users or [])

    @property
    def users(self) -> tuple[User, ...]:
        """Snapshot of the registry."""
        return tuple(self._users)

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def _find_by_email(self, email: str) -> Optional[User]:
        for user in self._users:
            if user.email == email:
                return user
        return None

    def add_user(self, name: str, email: str, password: str) -> Optional[User]:
        """
        Append a user to the registry without starting a session.

        Returns None if the email is already registered.
        """
        if self._find_by_email(email) is not None:
            return None

        user = User(
            id=timestamp_id(self._clock, {u.id for u in self._users}),
            email=email,
            name=name,
            password=password,
        )
        self._users.append(user)
        return user

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> Optional[str]:
        """
        Register a new user and make them the active session.

        Returns:
            The session token, or None if the email is already registered
        """
        user = self.add_user(name=name, email=email, password=password)
        if user is None:
            if self._audit_logger:
                self._audit_logger.log_registration_rejected(email=email)
            return None

        if self._audit_logger:
            self._audit_logger.log_user_registered(user_id=user.id, email=user.email)

        return self._start_session(user)

    def login(self, email: str, password: str) -> Optional[str]:
        """
        Start a session for an exactly matching email and password.

        Returns:
            The session token, or None if no record matches
        """
        user = next(
            (u for u in self._users if u.email == email and u.password == password),
            None,
        )
        if user is None:
            if self._audit_logger:
                self._audit_logger.log_login_failed(email=email)
            return None

        if self._audit_logger:
            self._audit_logger.log_login_succeeded(user_id=user.id, email=user.email)

        return self._start_session(user)

    def logout(self) -> None:
        """Clear the token and the cached user."""
        current = self.get_current_user()
        self._store.delete(self._storage_settings.token_key)
        self._store.delete(self._storage_settings.user_key)

        if self._audit_logger:
            self._audit_logger.log_logout(user_id=current.id if current else None)

    def is_authenticated(self) -> bool:
        return self._decode_session() is not None

    def get_current_user(self) -> Optional[PublicUser]:
        session = self._decode_session()
        return session.user if session else None

    def get_cached_user(self) -> Optional[PublicUser]:
        """
        Read the user cookie.

        This is only a display cache; authentication always goes
        through the token.
        """
        try:
            data = self._store.get_json(self._storage_settings.user_key)
        except CorruptDataError:
            return None
        if data is None:
            return None
        try:
            return PublicUser.model_validate(data)
        except ValidationError:
            return None

    def get_display_user(self) -> Optional[PublicUser]:
        """
        The user to show in the UI.

        Prefers the cached cookie, but only when it belongs to the user
        the token authenticates.
        """
        current = self.get_current_user()
        if current is None:
            return None
        cached = self.get_cached_user()
        if cached is not None and cached.id == current.id:
            return cached
        return current

    # -------------------------------------------------------------------------
    # Token handling
    # -------------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        """Mint a signed token for the user, valid for the configured TTL."""
        payload = SessionPayload(
            user=user.to_public(),
            exp=now_ms(self._clock) + self._settings.token_ttl_ms,
        )
        return jwt.encode(
            payload.model_dump(),
            self._settings.secret_key,
            algorithm=self._settings.algorithm,
        )

    def _start_session(self, user: User) -> str:
        token = self.issue_token(user)
        self._store.set(self._storage_settings.token_key, token)
        self._store.set_json(
            self._storage_settings.user_key,
            user.to_public().model_dump(),
            max_age_seconds=self._storage_settings.cookie_expiry_seconds,
        )
        return token

    def _decode_session(self) -> Optional[SessionPayload]:
        """Decode the stored token, returning None for anything invalid."""
        token = self._store.get(self._storage_settings.token_key)
        if not token:
            return None

        try:
            # exp is in milliseconds, so the library's own seconds-based
            # check is disabled and expiry is compared below.
            claims = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options={"verify_exp": False},
            )
            session = SessionPayload.model_validate(claims)
        except (JWTError, ValidationError) as e:
            self._session_invalid(f"malformed token: {type(e).__name__}")
            return None

        if session.is_expired(now_ms(self._clock)):
            self._session_invalid("token expired")
            return None

        return session

    def _session_invalid(self, reason: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_session_invalid(reason=reason)
