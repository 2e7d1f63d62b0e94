"""Credential checks for the admin login."""

import logging
from dataclasses import dataclass
from typing import Protocol

from label_admin.errors import AuthError, ValidationError

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    """Interface for checking a username/password pair."""

    def verify(self, username: object, password: object) -> bool:
        """Return True when the pair identifies an admin."""


@dataclass(frozen=True)
class FixedCredentialVerifier(CredentialVerifier):
    """Compares against a single configured pair, exact and case-sensitive."""

    username: str
    password: str

    def verify(self, username: object, password: object) -> bool:
        """Return True only when both fields match exactly."""
        return username == self.username and password == self.password


@dataclass
class AuthService:
    """Application service for the login endpoint."""

    verifier: CredentialVerifier

    def login(self, username: object, password: object) -> None:
        """Raise unless the credentials are present and valid."""
        if not username or not password:
            raise ValidationError("Username and password are required")
        if not self.verifier.verify(username, password):
            logger.info("Rejected admin login attempt")
            raise AuthError("Invalid username or password")
        logger.info("Admin login succeeded")
