"""Best-effort reachability check for arbitrary URLs.

The probe never raises: a timeout, a refused connection, a malformed URL or
anything else unexpected all come back as ``UNKNOWN``.
"""
import asyncio
import logging

import httpx

from shortlinks import errors, schemas

logger = logging.getLogger("shortlinks.preview")

UNKNOWN = schemas.PreviewOut(ok=False, status=None, content_type=None)


async def _head(url: str, timeout: float, transport: httpx.AsyncBaseTransport | None) -> httpx.Response:
    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), follow_redirects=True, transport=transport
        ) as client:
            # One deadline for the whole exchange, redirect hops included
            return await asyncio.wait_for(client.head(url), timeout)
    except asyncio.TimeoutError as exc:
        raise errors.ExternalProbeFailure(f"no answer within {timeout}s") from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise errors.ExternalProbeFailure(f"{type(exc).__name__}: {exc}") from exc


async def probe(
    url: str,
    timeout: float = 4.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> schemas.PreviewOut:
    try:
        response = await _head(url, timeout, transport)
    except errors.ExternalProbeFailure as exc:
        logger.info("Preview of %s failed: %s", url, exc)
        return UNKNOWN
    except Exception:
        logger.exception("Unexpected error previewing %s", url)
        return UNKNOWN

    return schemas.PreviewOut(
        ok=response.is_success,
        status=response.status_code,
        content_type=response.headers.get("content-type") or "unknown",
    )
