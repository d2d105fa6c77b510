"""
How a session token travels with a request.

Non-browser clients send ``Authorization: Bearer <token>``; the browser
client relies on an HttpOnly cookie. When both are present the header
wins. Tokens are emitted both ways so either client can use one endpoint.
"""

from datetime import timedelta
from typing import Optional

from fastapi import Request, Response

from careers.core.config import Settings

BEARER_SCHEME = "bearer"


class TokenTransport:
    def __init__(self, cookie_name: str = "token", secure: bool = False):
        self.cookie_name = cookie_name
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenTransport":
        return cls(cookie_name=settings.TOKEN_COOKIE_NAME, secure=settings.cookie_secure)

    def extract(self, request: Request) -> Optional[str]:
        """Return the raw token from the header, else the cookie, else None."""
        header_token = self._from_authorization_header(request.headers.get("authorization"))
        if header_token:
            return header_token

        cookie_token = request.cookies.get(self.cookie_name)
        return cookie_token or None

    def attach(self, response: Response, token: str, max_age: timedelta) -> None:
        """Set the HttpOnly cookie; callers put the same token in the body."""
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(max_age.total_seconds()),
            httponly=True,
            secure=self.secure,
            samesite="strict",
            path="/",
        )

    def clear(self, response: Response) -> None:
        # Header-held copies stay valid until they expire; tokens are stateless.
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="strict",
        )

    @staticmethod
    def _from_authorization_header(value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        parts = value.split()
        if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
            return None
        return parts[1]
