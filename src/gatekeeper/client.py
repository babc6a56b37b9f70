"""Async HTTP transport for the knowledge-base backend."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError, field_validator

from .exceptions import TransportError
from .lifecycle import PendingRequest, RequestKind

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:6969"
DEFAULT_TIMEOUT_SECONDS = 30.0


class BackendReply(BaseModel):
    """Response body shared by ``/ask`` and ``/remember``."""

    answer: str
    success: bool

    @field_validator("answer", mode="before")
    @classmethod
    def _coerce_answer(cls, value: Any) -> str:
        # Failed backend calls may echo an error object instead of text.
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False)


class KnowledgeBaseClient:
    """Issue Ask/Remember calls against the local backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def ask(self, query: str) -> BackendReply:
        """Send a free-text question as ``{"query": ...}``."""
        return await self._post(
            "/ask",
            content=json.dumps({"query": query}, ensure_ascii=False).encode("utf-8"),
            content_type="application/json",
        )

    async def remember(self, data: str) -> BackendReply:
        """Send raw text for the backend to index."""
        return await self._post(
            "/remember",
            content=data.encode("utf-8"),
            content_type="text/plain",
        )

    async def send(self, request: PendingRequest) -> BackendReply:
        """Dispatch a pending request to the matching endpoint."""
        if request.kind is RequestKind.REMEMBER:
            return await self.remember(request.payload)
        return await self.ask(request.payload)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, path: str, *, content: bytes, content_type: str) -> BackendReply:
        try:
            # httpx timeouts are per phase; the whole call is capped here.
            response = await asyncio.wait_for(
                self._client.post(
                    path, content=content, headers={"Content-Type": content_type}
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            LOGGER.warning(
                "backend.request.timeout",
                extra={"event": "backend.request.timeout", "path": path},
            )
            raise TransportError(
                f"request timed out after {self.timeout:g} seconds", kind="timeout"
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "backend.request.failed",
                extra={
                    "event": "backend.request.failed",
                    "path": path,
                    "error_type": type(exc).__name__,
                },
            )
            raise TransportError(
                f"cannot reach backend at {self.base_url}: {exc}", kind="connect"
            ) from exc

        try:
            return BackendReply.model_validate_json(response.content)
        except ValidationError as exc:
            if response.is_error:
                raise TransportError(
                    f"backend returned HTTP {response.status_code}", kind="http"
                ) from exc
            raise TransportError(
                "backend returned a malformed response", kind="decode"
            ) from exc
