"""
Session / Authentication.

Exchanges credentials for the vendor's session token. The service
answers POST /login with a Set-Cookie carrying the token; the token is
kept in an immutable Session and attached to every later request.

A Session is never written to disk and is safe to share read-only
between concurrent tasks.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from fakeyou.api.schemas import LoginPayload, LoginResponse
from fakeyou.core.logging import fail, get_logger, info, success
from fakeyou.errors import AuthError, FakeYouError
from fakeyou.services.http import ApiTransport
from fakeyou.services.validators import validate_credentials

_LOG = get_logger("fakeyou.session")


@dataclass(frozen=True)
class Session:
    """
    Authenticated session.

    Attributes:
        username: The username or email used to log in.
        token: Opaque session token (the vendor's session cookie value).
    """
    username: str
    token: str = field(repr=False)


async def login(transport: ApiTransport, username: str, password: str) -> Session:
    """
    Log in and attach the session token to the transport.

    Args:
        transport: Transport whose later requests should be authenticated.
        username: Username or email.
        password: Password.

    Returns:
        The new Session.

    Raises:
        AuthError: If credentials are blank or rejected, the response
            carries no token, or the network call fails.
    """
    username, password = validate_credentials(username, password)
    payload = LoginPayload(username_or_email=username, password=password)

    try:
        response = await transport.request(
            "POST", "/login",
            json=payload.model_dump(),
            error_cls=AuthError,
            action="login",
        )
        body = transport.parse(response, LoginResponse, error_cls=AuthError, action="login")
    except FakeYouError as e:
        fail(_LOG, "login_failed", username=username, error=e.code)
        if isinstance(e, AuthError):
            raise
        # 429 during login is still a failed login
        raise AuthError(e.message, details=e.details) from e

    if not body.success:
        fail(_LOG, "login_failed", username=username, error=body.error_type or "rejected")
        raise AuthError(details={"error_type": body.error_type} if body.error_type else None)

    token = response.cookies.get(transport.config.api.session_cookie)
    if not token:
        fail(_LOG, "login_failed", username=username, error="no_session_token")
        raise AuthError("Login response did not carry a session token")

    transport.set_session_cookie(token)
    success(_LOG, "login_ok", username=username)
    return Session(username=username, token=token)


async def logout(transport: ApiTransport, session: Session) -> None:
    """
    End a session on the server and drop the token locally.

    The local token is dropped even if the server call fails; the
    failure is still raised.

    Raises:
        AuthError: If the server rejects the logout or the call fails.
    """
    try:
        await transport.request("POST", "/logout", error_cls=AuthError, action="logout")
    finally:
        transport.set_session_cookie(None)
    info(_LOG, "logout_ok", username=session.username)
