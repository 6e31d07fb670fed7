"""
src/sync/transports.py
──────────────────────
Inbound reading transports.

  ReadingPoller : HTTP GET against the sensor API (JSON array, most recent last)
  PushChannel   : WebSocket subscription delivering `new_data` events

Both translate transport problems into the synchronizer's error taxonomy;
neither touches history or alert state.
"""
from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any, Protocol

import aiohttp
import httpx

from config.settings import settings
from src.sync.errors import ConnectionFailure, DataFailure

logger = logging.getLogger(__name__)

NEW_DATA_EVENT = "new_data"


class ReadingPoller:
    """
    Pulls readings from the sensor API.

    Reuses a single httpx.AsyncClient; `transport` lets tests plug in an
    httpx.MockTransport.
    """

    def __init__(
        self,
        url: str,
        timeout: float = settings.POLL_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch(self, timeout: float | None = None) -> list[dict[str, Any]]:
        """
        Fetch the reading array.

        Raises:
            ConnectionFailure: transport error, timeout or non-2xx status
            DataFailure: body is not JSON, not an array, or empty
        """
        client = await self._get_client()
        try:
            response = await client.get(
                self.url,
                headers={
                    "Accept": "application/json",
                    "Cache-Control": "no-cache",
                    "Pragma": "no-cache",
                },
                timeout=timeout or self.timeout,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ConnectionFailure(f"Timeout fetching readings: {e}", url=self.url) from e
        except httpx.HTTPStatusError as e:
            raise ConnectionFailure(f"HTTP {e.response.status_code} from sensor API", url=self.url) from e
        except httpx.HTTPError as e:
            raise ConnectionFailure(f"{e.__class__.__name__}: {e}", url=self.url) from e

        try:
            data = response.json()
        except ValueError as e:
            raise DataFailure("Sensor API returned a non-JSON body") from e

        if not isinstance(data, list):
            raise DataFailure(f"Expected a JSON array, got {type(data).__name__}")
        if not data:
            raise DataFailure("Sensor API returned no readings")
        return data


class PushHandler(Protocol):
    async def on_push_connected(self) -> None: ...

    async def on_push_message(self, payload: Any) -> None: ...

    async def on_push_disconnected(self, reason: str) -> None: ...


class PushChannel:
    """
    WebSocket subscriber with a bounded reconnect policy.

    Frames are JSON objects {"event": ..., "data": ...}; only `new_data`
    events are forwarded. After a drop or a failed handshake the channel
    retries up to `reconnect_attempts` times, `reconnect_delay` seconds
    apart; the counter resets after every successful handshake.
    """

    def __init__(
        self,
        url: str,
        reconnect_attempts: int = settings.PUSH_RECONNECT_ATTEMPTS,
        reconnect_delay: float = settings.PUSH_RECONNECT_DELAY_S,
        handshake_timeout: float = settings.CATCHUP_TIMEOUT_S,
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ):
        self.url = url
        self.reconnect_attempts = reconnect_attempts
        self.reconnect_delay = reconnect_delay
        self.handshake_timeout = handshake_timeout
        self._session_factory = session_factory
        self._session: aiohttp.ClientSession | None = None
        self.connected = False

    async def close(self) -> None:
        self.connected = False
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def run(self, handler: PushHandler) -> None:
        """Connect, forward events, reconnect; returns once attempts are exhausted."""
        retries = 0
        try:
            while True:
                reason = await self._run_once(handler)
                if self.connected:
                    self.connected = False
                    retries = 0
                await handler.on_push_disconnected(reason)

                if retries >= self.reconnect_attempts:
                    logger.warning(
                        f"Push channel gave up after {self.reconnect_attempts} reconnect attempts"
                    )
                    return
                retries += 1
                await asyncio.sleep(self.reconnect_delay)
        finally:
            await self.close()

    async def _run_once(self, handler: PushHandler) -> str:
        if self._session is None or self._session.closed:
            self._session = self._session_factory()
        try:
            ws = await asyncio.wait_for(
                self._session.ws_connect(self.url, heartbeat=30.0),
                timeout=self.handshake_timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            return f"handshake failed: {e.__class__.__name__}: {e}"

        try:
            self.connected = True
            logger.info(f"Push channel connected: {self.url}")
            await handler.on_push_connected()
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    await self._dispatch(handler, msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    return f"WebSocket error: {ws.exception()}"
            return "closed by server"
        except aiohttp.ClientError as e:
            return f"{e.__class__.__name__}: {e}"
        finally:
            await ws.close()

    async def _dispatch(self, handler: PushHandler, raw: str) -> None:
        try:
            frame = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring non-JSON push frame")
            return
        if not isinstance(frame, dict) or frame.get("event") != NEW_DATA_EVENT:
            return
        await handler.on_push_message(frame.get("data"))
