"""Pydantic models for API request payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    """Credentials posted to the login endpoint.

    Values are taken as posted; a present value of the wrong type is simply a
    credential that does not match.
    """

    model_config = ConfigDict(extra="ignore")

    username: Any = None
    password: Any = None
