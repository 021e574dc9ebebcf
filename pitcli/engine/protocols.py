"""Narrow protocols for the remote client collaborator.

The wire protocol (handshake bytes, request/notify encoding, push decoding)
lives entirely behind these interfaces. pitcli only drives connection
lifecycle and routes bytes in and out.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class Message:
    """One inbound server message (push or unsolicited response)."""

    payload: bytes


@runtime_checkable
class RemoteClient(Protocol):
    """A single connection to the remote application server."""

    async def connectSecure(self, address: str, skipVerify: bool = True) -> None: ...
    async def connectPlain(self, address: str) -> None: ...
    async def connectReliableDatagram(self, address: str) -> None: ...
    def connectedStatus(self) -> bool: ...
    def disconnect(self) -> None: ...
    async def sendRequest(self, route: str, payload: bytes) -> bytes: ...
    async def sendNotify(self, route: str, payload: bytes) -> None: ...
    def inbound(self) -> asyncio.Queue[Message]: ...


@runtime_checkable
class SchemaRemoteClient(RemoteClient, Protocol):
    """Remote client whose message shapes come from a server schema."""

    async def loadServerInfo(self, address: str) -> None: ...
    def addPushResponse(self, route: str, typeTag: str) -> None: ...


@runtime_checkable
class RemoteClientFactory(Protocol):
    """Builds a fresh client for every connect attempt."""

    def jsonClient(self) -> RemoteClient: ...
    def schemaClient(self, docs: str) -> SchemaRemoteClient: ...
