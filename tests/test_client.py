"""Tests for the HTTP transport against a mocked backend."""

from __future__ import annotations

import asyncio
import json
import time
import unittest

import httpx

from gatekeeper.client import BackendReply, KnowledgeBaseClient
from gatekeeper.exceptions import TransportError
from gatekeeper.lifecycle import PendingRequest, RequestKind


class _Recorder:
    """Mock transport handler that records requests and replays a response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class KnowledgeBaseClientTests(unittest.IsolatedAsyncioTestCase):
    """Validate wire format and error mapping."""

    def _client(self, recorder: _Recorder) -> KnowledgeBaseClient:
        client = KnowledgeBaseClient(
            base_url="http://localhost:6969/",
            timeout=30.0,
            transport=httpx.MockTransport(recorder),
        )
        self.addAsyncCleanup(client.aclose)
        return client

    async def test_ask_posts_json_query(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"answer": "hi there", "success": True}))
        reply = await self._client(recorder).ask("hello")

        self.assertEqual(reply, BackendReply(answer="hi there", success=True))
        request = recorder.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), "http://localhost:6969/ask")
        self.assertEqual(request.headers["content-type"], "application/json")
        self.assertEqual(json.loads(request.content), {"query": "hello"})

    async def test_remember_posts_plain_text(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"answer": "stored", "success": True}))
        reply = await self._client(recorder).remember("my wifi password is hunter2")

        self.assertTrue(reply.success)
        request = recorder.requests[0]
        self.assertEqual(str(request.url), "http://localhost:6969/remember")
        self.assertEqual(request.headers["content-type"], "text/plain")
        self.assertEqual(request.content, b"my wifi password is hunter2")

    async def test_send_routes_by_request_kind(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"answer": "ok", "success": True}))
        client = self._client(recorder)
        await client.send(PendingRequest(RequestKind.REMEMBER, "data", started_at=0.0))
        await client.send(PendingRequest(RequestKind.ASK, "query", started_at=0.0))
        self.assertEqual(
            [request.url.path for request in recorder.requests], ["/remember", "/ask"]
        )

    async def test_unsuccessful_reply_is_returned_not_raised(self) -> None:
        recorder = _Recorder(httpx.Response(200, json={"answer": "stored", "success": False}))
        reply = await self._client(recorder).remember("x")
        self.assertFalse(reply.success)
        self.assertEqual(reply.answer, "stored")

    async def test_non_string_answer_is_coerced(self) -> None:
        recorder = _Recorder(
            httpx.Response(200, json={"answer": {"error": "boom"}, "success": False})
        )
        reply = await self._client(recorder).ask("x")
        self.assertEqual(json.loads(reply.answer), {"error": "boom"})

    async def test_timeout_maps_to_transport_error(self) -> None:
        recorder = _Recorder(httpx.ReadTimeout("slow"))
        with self.assertRaises(TransportError) as ctx:
            await self._client(recorder).ask("x")
        self.assertEqual(ctx.exception.kind, "timeout")
        self.assertIn("30 seconds", str(ctx.exception))

    async def test_slow_backend_is_capped_by_total_timeout(self) -> None:
        async def slow_handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={"answer": "late", "success": True})

        client = KnowledgeBaseClient(
            base_url="http://localhost:6969",
            timeout=0.05,
            transport=httpx.MockTransport(slow_handler),
        )
        self.addAsyncCleanup(client.aclose)
        started = time.monotonic()
        with self.assertRaises(TransportError) as ctx:
            await client.ask("x")
        self.assertLess(time.monotonic() - started, 2.0)
        self.assertEqual(ctx.exception.kind, "timeout")

    async def test_connection_failure_maps_to_transport_error(self) -> None:
        recorder = _Recorder(httpx.ConnectError("connection refused"))
        with self.assertRaises(TransportError) as ctx:
            await self._client(recorder).ask("x")
        self.assertEqual(ctx.exception.kind, "connect")

    async def test_malformed_body_maps_to_decode_error(self) -> None:
        recorder = _Recorder(httpx.Response(200, content=b"not json"))
        with self.assertRaises(TransportError) as ctx:
            await self._client(recorder).ask("x")
        self.assertEqual(ctx.exception.kind, "decode")

    async def test_http_error_without_reply_body(self) -> None:
        recorder = _Recorder(httpx.Response(500, content=b"internal error"))
        with self.assertRaises(TransportError) as ctx:
            await self._client(recorder).ask("x")
        self.assertEqual(ctx.exception.kind, "http")
        self.assertIn("500", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
