"""Client-side session gate guarding every dashboard page."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol

from label_admin.errors import ApiRequestError, NetworkError

logger = logging.getLogger(__name__)

AUTH_KEY = "isAuthenticated"
AUTH_VALUE = "true"
LOGIN_ROUTE = "/login"
HOME_ROUTE = "/"

StoreListener = Callable[[str], None]


class SessionStore(Protocol):
    """Persistent key-value store holding the session flag."""

    def get(self, key: str) -> str | None:
        """Return the stored value, if any."""

    def set(self, key: str, value: str) -> None:
        """Store a value and notify subscribers."""

    def clear(self, key: str) -> None:
        """Remove a value and notify subscribers."""

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener and return a function that removes it."""


class LoginClient(Protocol):
    """The part of the admin API the session needs."""

    async def login(self, username: str, password: str) -> dict[str, object]:
        """Check credentials, raising on rejection."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local store; every gate sharing it sees changes immediately."""

    values: dict[str, str] = field(default_factory=dict)
    _listeners: list[StoreListener] = field(
        default_factory=list, init=False, repr=False
    )

    def get(self, key: str) -> str | None:
        """Return the stored value, if any."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value and notify subscribers."""
        self.values[key] = value
        self._notify(key)

    def clear(self, key: str) -> None:
        """Remove a value and notify subscribers."""
        self.values.pop(key, None)
        self._notify(key)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a change listener."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)


class GateState(StrEnum):
    """Authentication states of the gate."""

    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of one check: whether to render and where to redirect."""

    state: GateState
    route: str
    redirect_to: str | None = None

    @property
    def render(self) -> bool:
        """Pages render only when no redirect is pending."""
        return self.redirect_to is None


@dataclass
class SessionGate:
    """Re-evaluates the stored flag on every navigation and store change."""

    store: SessionStore
    on_redirect: Callable[[str], None] | None = None
    login_route: str = LOGIN_ROUTE
    home_route: str = HOME_ROUTE
    state: GateState = field(default=GateState.CHECKING, init=False)
    route: str | None = field(default=None, init=False)
    last_decision: GateDecision | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._unsubscribe = self.store.subscribe(self._on_store_change)

    def navigate(self, route: str) -> GateDecision:
        """Record a route change and check access to it."""
        self.route = route
        return self.check()

    def check(self) -> GateDecision:
        """Re-read the flag for the current route."""
        if self.route is None:
            raise RuntimeError("SessionGate.check called before navigate")
        self.state = GateState.CHECKING
        authenticated = self.store.get(AUTH_KEY) == AUTH_VALUE
        self.state = (
            GateState.AUTHENTICATED if authenticated else GateState.UNAUTHENTICATED
        )
        redirect_to = None
        if not authenticated and self.route != self.login_route:
            redirect_to = self.login_route
        elif authenticated and self.route == self.login_route:
            redirect_to = self.home_route
        decision = GateDecision(
            state=self.state, route=self.route, redirect_to=redirect_to
        )
        self.last_decision = decision
        if redirect_to is not None and self.on_redirect is not None:
            self.on_redirect(redirect_to)
        return decision

    def close(self) -> None:
        """Stop listening for store changes."""
        self._unsubscribe()

    def _on_store_change(self, key: str) -> None:
        if key != AUTH_KEY or self.route is None:
            return
        self.check()


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login attempt as shown on the login form."""

    success: bool
    error: str | None = None


@dataclass
class SessionContext:
    """Application-level session handed to the dashboard root."""

    store: SessionStore
    client: LoginClient

    @property
    def is_authenticated(self) -> bool:
        """Whether the stored flag marks this context as logged in."""
        return self.store.get(AUTH_KEY) == AUTH_VALUE

    async def login(self, username: str, password: str) -> LoginResult:
        """Check credentials with the API and set the flag on success."""
        try:
            await self.client.login(username, password)
        except ApiRequestError as exc:
            return LoginResult(
                success=False, error=exc.message or "Invalid credentials"
            )
        except NetworkError:
            logger.warning("Login request failed", exc_info=True)
            return LoginResult(success=False, error="Network error. Please try again.")
        self.store.set(AUTH_KEY, AUTH_VALUE)
        return LoginResult(success=True)

    def logout(self) -> None:
        """Clear the flag; gates sharing the store redirect on their next check."""
        self.store.clear(AUTH_KEY)
