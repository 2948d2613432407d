"""httpx wrapper shared by the Jira and Tempo adapters.

- Standardizes timeouts, headers and auth for both services.
- Turns network failures and non-2xx responses into `TransportError`s that
  carry a dump of the response.
- The transport is injectable, so tests swap in `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.errors import TransportError

logger = logging.getLogger(__name__)


def build_client(
    settings: AppSettings,
    *,
    base_url: str,
    auth: httpx.Auth | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with the tool's defaults."""

    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.Client(
        base_url=base_url,
        auth=auth,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )


def dump_response(response: httpx.Response) -> str:
    """Status line, headers and body of `response`, as plain text."""

    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    for name, value in response.headers.items():
        lines.append(f"{name}: {value}")
    try:
        body = response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError):
        body = "<unreadable body>"
    return "\n".join(lines) + "\n\n" + body


def send(
    client: httpx.Client,
    method: str,
    url: str,
    *,
    service: str,
    error_cls: type[TransportError] = TransportError,
    **kwargs: Any,
) -> httpx.Response:
    """Perform one request; no retry.

    Raises `error_cls` on a non-2xx status and `TransportError` when no
    response could be obtained.
    """

    where = f"while doing request ({method} {url})"
    logger.debug("%s request: %s %s params=%s", service, method, url, kwargs.get("params"))
    try:
        response = client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        raise TransportError(f"{service} error {where}: {exc}") from exc

    if not response.is_success:
        dump = dump_response(response)
        logger.debug("------ %s response:\n%s", service, dump)
        raise error_cls(
            f"{service} error {where}: unsuccessful status ({response.status_code})",
            status_code=response.status_code,
            dump=dump,
        )
    return response


def json_body(response: httpx.Response, *, service: str) -> Any:
    """Decoded JSON body, or `TransportError` if the body is not JSON."""

    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(
            f"{service} error: response is not valid JSON",
            status_code=response.status_code,
            dump=dump_response(response),
        ) from exc
