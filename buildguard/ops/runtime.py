"""Runtime smoke test executed against a served production build."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from buildguard import console
from buildguard.errors import ContentError, PreconditionError, TransportError
from buildguard.ops.server import serve_build
from buildguard.settings import TIMEOUT_BUDGET_SEC, Settings

logger = logging.getLogger(__name__)

ROOT_MARKER = re.compile(r"""id\s*=\s*["']root["']""")

ERROR_SIGNATURES = (
    "Cannot read properties of undefined",
    "ReactCurrentDispatcher",
    "React error",
    "TypeError",
)

COMPATIBILITY_HINT = (
    "This suggests React 19 + ReactDOM 17 compatibility issues.",
    "Consider upgrading ReactDOM to match React version.",
)


@dataclass
class RuntimeReport:
    """Outcome of a passing smoke test."""

    url: str
    http_status: int
    duration_ms: int
    server_output: str = ""
    server_error_output: str = ""


def inspect_markup(body: str) -> None:
    """Raise :class:`ContentError` unless ``body`` looks like a mounted React app."""

    if not ROOT_MARKER.search(body):
        raise ContentError("React app root element not found")

    console.success("Basic HTML structure looks good")

    matched = [signature for signature in ERROR_SIGNATURES if signature in body]
    if matched:
        logger.warning({"event": "runtime_error_signature", "signatures": matched})
        raise ContentError("React runtime error detected in HTML output")


async def probe(
    url: str,
    *,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """Issue a single GET with a total ``timeout``; nothing is retried."""

    logger.info("Probing %s", url)
    async with httpx.AsyncClient(transport=transport, timeout=timeout) as client:
        try:
            return await asyncio.wait_for(client.get(url), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise TransportError("HTTP request timeout") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"HTTP request failed: {exc}") from exc


async def run_smoke_test(
    settings: Settings,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RuntimeReport:
    """Serve the build, fetch its root page once and check the markup.

    ``transport`` replaces the network transport of the HTTP client, which lets
    the probe be answered in-process. The server is started either way.
    """

    console.info("🔍 Testing runtime compatibility...")

    if not settings.build_path.is_dir():
        raise PreconditionError("Build directory not found. Run yarn build:only first.")

    if settings.warmup_seconds + settings.request_timeout > TIMEOUT_BUDGET_SEC:
        logger.warning(
            {
                "event": "timeout_budget_exceeded",
                "warmup_sec": settings.warmup_seconds,
                "request_timeout_sec": settings.request_timeout,
                "budget_sec": TIMEOUT_BUDGET_SEC,
            }
        )

    started = time.monotonic()
    url = f"{settings.base_url}/"

    async with serve_build(settings) as server:
        # Blind warm-up; the server gives no readiness signal.
        await asyncio.sleep(settings.warmup_seconds)
        response = await probe(url, timeout=settings.request_timeout, transport=transport)
        inspect_markup(response.text)

    report = RuntimeReport(
        url=url,
        http_status=response.status_code,
        duration_ms=int((time.monotonic() - started) * 1000),
        server_output=server.output,
        server_error_output=server.error_output,
    )
    logger.info(
        {"event": "runtime_check_passed", "url": url, "duration_ms": report.duration_ms}
    )
    console.success("Runtime compatibility test passed")
    return report
