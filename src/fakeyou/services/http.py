"""
HTTP Transport for the FakeYou API.

ApiTransport wraps one httpx.AsyncClient and gives every service the
same request path:

    build URL → send → map transport errors → map HTTP status → parse body

Errors are mapped onto the caller's error kind (see errors.py), so a
service only states which error class it raises and what it was doing.
The session cookie, once attached, rides on every later request through
the client's cookie jar.
"""
from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from fakeyou.core.config import ClientConfig
from fakeyou.core.logging import debug, get_logger, verbose
from fakeyou.errors import FakeYouError, raise_for_status, transport_error
from fakeyou.utils.timeit import timeit

_LOG = get_logger("fakeyou.http")

M = TypeVar("M", bound=BaseModel)


def create_http_client(config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    Build the AsyncClient used for all vendor calls.

    Args:
        config: Validated client configuration.
        transport: Optional custom transport (e.g., httpx.MockTransport).
    """
    return httpx.AsyncClient(
        base_url=config.api.base_url,
        headers={
            "User-Agent": config.http.user_agent,
            "Accept": "application/json",
        },
        timeout=httpx.Timeout(config.http.timeout_s, connect=config.http.connect_timeout_s),
        transport=transport,
    )


class ApiTransport:
    """
    Request helper bound to one AsyncClient.

    Attributes:
        http: The underlying httpx.AsyncClient.
        config: Client configuration.
    """

    def __init__(self, http: httpx.AsyncClient, config: ClientConfig):
        self.http = http
        self.config = config

    def set_session_cookie(self, token: Optional[str]) -> None:
        """Attach (or with None, drop) the session token for later requests."""
        name = self.config.api.session_cookie
        # The jar may already hold a host-scoped copy from Set-Cookie
        self.http.cookies.delete(name)
        if token is not None:
            self.http.cookies.set(name, token)

    async def request(
        self,
        method: str,
        path: str,
        *,
        error_cls: Type[FakeYouError],
        action: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Send a request and map failures onto error_cls.

        Args:
            method: HTTP method.
            path: Path relative to the API base URL.
            error_cls: Error kind raised for transport and HTTP failures.
            action: Short description for messages and logs.
            **kwargs: Passed to httpx (json=, data=, files=, ...).

        Raises:
            AuthError: On HTTP 401/403.
            TooManyRequestsError: On HTTP 429.
            error_cls: On other HTTP errors and transport failures.
        """
        with timeit(action) as t:
            try:
                response = await self.http.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                raise transport_error(e, error_cls, action) from e

        verbose(
            _LOG, "http_request",
            seconds=t.seconds, method=method, path=path, status=response.status_code,
        )
        raise_for_status(response, error_cls, action)
        return response

    def parse(
        self,
        response: httpx.Response,
        model: Type[M],
        *,
        error_cls: Type[FakeYouError],
        action: str,
    ) -> M:
        """
        Validate a JSON body against a schema.

        Raises:
            error_cls: If the body is not JSON or does not match the schema.
        """
        try:
            parsed = model.model_validate_json(response.content)
        except ValidationError as e:
            raise error_cls(
                f"{action} returned a malformed response",
                details={"model": model.__name__, "errors": e.error_count()},
            ) from e
        debug(_LOG, "response_parsed", model=model.__name__, path=response.request.url.path)
        return parsed

    async def aclose(self) -> None:
        await self.http.aclose()
