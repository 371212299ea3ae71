"""Answers connect requests from clients on the local network.

A small HTTP server reports this device's details on ``getInfo`` and accepts
encrypted login blobs on ``addUser``. Each accepted login can be read from the
server by iterating over it asynchronously.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Protocol
from urllib.parse import parse_qsl

from aiohttp import web
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

log = logging.getLogger(__name__)

_IV_LEN = 16
_MAC_LEN = 20
_CLOSED = object()


class DiscoveryError(Exception):
    """Setting up discovery or handling a discovery request failed."""


class LocalKeys(Protocol):
    """The local half of a Diffie-Hellman key exchange."""

    def public_key(self) -> bytes: ...

    def shared_secret(self, remote_key: bytes) -> bytes: ...


@dataclass(frozen=True)
class DiscoveryConfig:
    """How this device presents itself to clients."""

    device_id: str
    client_id: str
    name: str = "Canzone"
    device_type: str = "Speaker"
    library_version: str = "0.1.0"


@dataclass(frozen=True)
class ReceivedLogin:
    """A login handed over by a client: the user name and the decrypted blob."""

    username: str
    blob: bytes
    device_id: str


def _hmac_sha1(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha1).digest()


def decrypt_blob(encrypted_blob: bytes, shared_key: bytes) -> Optional[bytes]:
    """Check and decrypt a login blob.

    The blob is a 16-byte IV, the ciphertext and a 20-byte HMAC-SHA1. Returns
    ``None`` when the checksum does not match; raises ``DiscoveryError`` when the
    blob is too short to hold an IV and a checksum.
    """
    if len(encrypted_blob) < _IV_LEN + _MAC_LEN:
        raise DiscoveryError(
            f"Creating SHA1 HMAC failed for base key {list(encrypted_blob)!r}"
        )
    iv = encrypted_blob[:_IV_LEN]
    encrypted = encrypted_blob[_IV_LEN:-_MAC_LEN]
    checksum = encrypted_blob[-_MAC_LEN:]

    base_key = hashlib.sha1(shared_key).digest()[:16]
    checksum_key = _hmac_sha1(base_key, b"checksum")
    encryption_key = _hmac_sha1(base_key, b"encryption")

    if not hmac.compare_digest(_hmac_sha1(checksum_key, encrypted), checksum):
        return None

    decryptor = Cipher(algorithms.AES(encryption_key[:16]), modes.CTR(iv)).decryptor()
    return decryptor.update(encrypted) + decryptor.finalize()


def _b64decode(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value.encode(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DiscoveryError(f"Invalid base64 in {what}: {exc}") from exc


def _require(params: dict[str, str], key: str) -> str:
    try:
        return params[key]
    except KeyError:
        raise DiscoveryError(f"Missing params for key {key}") from None


class RequestHandler:
    """Answers discovery requests and queues the logins it accepts."""

    def __init__(self, config: DiscoveryConfig, keys: LocalKeys) -> None:
        self.config = config
        self.keys = keys
        self.username: Optional[str] = None
        self.logins: asyncio.Queue[Any] = asyncio.Queue()

    def get_info(self) -> dict[str, Any]:
        """The device description returned for ``getInfo``."""
        return {
            "status": 101,
            "statusString": "OK",
            "spotifyError": 0,
            "version": "2.9.0",
            "deviceID": self.config.device_id,
            "deviceType": self.config.device_type,
            "remoteName": self.config.name,
            "publicKey": base64.b64encode(self.keys.public_key()).decode(),
            "brandDisplayName": "canzone",
            "modelDisplayName": "canzone",
            "libraryVersion": self.config.library_version,
            "resolverVersion": "1",
            "groupStatus": "NONE",
            "tokenType": "default",
            "clientID": self.config.client_id,
            "productID": 0,
            "scope": "streaming",
            "availability": "",
            "supported_drm_media_formats": [],
            "supported_capabilities": 1,
            "accountReq": "PREMIUM",
            "activeUser": self.username or "",
        }

    def add_user(self, params: dict[str, str]) -> dict[str, Any]:
        """Accept a login blob; queue the login and report the outcome."""
        username = _require(params, "userName")
        blob = _require(params, "blob")
        client_key = _require(params, "clientKey")

        encrypted_blob = _b64decode(blob, "blob")
        shared_key = self.keys.shared_secret(_b64decode(client_key, "clientKey"))

        decrypted = decrypt_blob(encrypted_blob, shared_key)
        if decrypted is None:
            log.warning("Login error for user %r: MAC mismatch", username)
            return {"status": 102, "spotifyError": 1, "statusString": "ERROR-MAC"}

        self.logins.put_nowait(ReceivedLogin(username, decrypted, self.config.device_id))
        return {"status": 101, "spotifyError": 0, "statusString": "OK"}

    def handle(self, method: str, params: dict[str, str]) -> tuple[int, Optional[dict[str, Any]]]:
        """Dispatch a request; returns the HTTP status and the JSON body, if any."""
        if method != "GET":
            log.debug("%s %r", method, params)
        action = params.get("action")
        if method == "GET" and action == "getInfo":
            return 200, self.get_info()
        if method == "POST" and action == "addUser":
            return 200, self.add_user(params)
        return 404, None


class DiscoveryServer:
    """The HTTP server that clients talk to; iterate over it for logins."""

    def __init__(self, config: DiscoveryConfig, keys: LocalKeys, port: int = 0) -> None:
        self._handler = RequestHandler(config, keys)
        self.port = port
        self._runner: Optional[web.AppRunner] = None

    async def start(self) -> None:
        """Bind on all interfaces; ``port`` then holds the port actually used."""
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._serve)
        runner = web.AppRunner(app)
        await runner.setup()
        try:
            site = web.TCPSite(runner, "0.0.0.0", self.port)
            await site.start()
        except OSError as exc:
            await runner.cleanup()
            raise DiscoveryError(f"Setting up the HTTP server failed: {exc}") from exc
        self._runner = runner
        self.port = runner.addresses[0][1]
        log.debug("Zeroconf server listening on 0.0.0.0:%d", self.port)

    async def close(self) -> None:
        """Stop serving; iteration ends once queued logins are read."""
        if self._runner is not None:
            log.debug("Shutting down discovery server")
            await self._runner.cleanup()
            self._runner = None
        self._handler.logins.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[ReceivedLogin]:
        return self

    async def __anext__(self) -> ReceivedLogin:
        item = await self._handler.logins.get()
        if item is _CLOSED:
            self._handler.logins.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item

    async def _serve(self, request: web.Request) -> web.Response:
        params = dict(parse_qsl(request.query_string, keep_blank_values=True))
        body = (await request.read()).decode("utf-8", "replace")
        params.update(parse_qsl(body, keep_blank_values=True))
        try:
            status, payload = self._handler.handle(request.method, params)
        except (DiscoveryError, ValueError) as exc:
            log.error("could not handle discovery request: %s", exc)
            return web.Response(status=500)
        if payload is None:
            return web.Response(status=status)
        text = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return web.Response(status=status, text=text)