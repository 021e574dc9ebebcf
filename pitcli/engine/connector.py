"""Turn an address into a live remote client connection.

Transport policy:

SECURE
    Try a secure handshake (certificate verification off; the operator
    trusts the target). If the peer closes the stream during the handshake
    it does not speak the secure protocol on this port, so fall back to a
    plain connection to the same address. Any other handshake error is
    reported as-is.

PLAIN
    Plain stream connection only.

DATAGRAM
    Reliable-UDP (KCP style) dial raced against a deadline. If the deadline
    wins the dial is left to finish in the background and whatever it
    produces is thrown away.

Nothing here retries; a failed connect is retried by the operator.
"""

from __future__ import annotations

import asyncio
import enum
import ssl
from dataclasses import dataclass, field
from typing import Final, cast

from loguru import logger

from pitcli.engine.errors import (
    AlreadyConnected,
    ConnectTimeout,
    DialFailure,
    HandshakeFailure,
    InvalidArguments,
    ServerInfoFailure,
)
from pitcli.engine.protocols import RemoteClient, RemoteClientFactory, SchemaRemoteClient
from pitcli.engine.pump import Sink
from pitcli.engine.session import SerializationMode, Session

DATAGRAM_DIAL_TIMEOUT: Final = 3.0

# what a peer closing the connection mid-handshake looks like
# (asyncio.IncompleteReadError is an EOFError too)
END_OF_STREAM: Final = (EOFError, ssl.SSLEOFError)


class Transport(enum.Enum):
    SECURE = "secure"
    PLAIN = "plain"
    DATAGRAM = "datagram"


@dataclass(slots=True, frozen=True)
class ConnectAttempt:
    address: str
    transport: Transport = Transport.SECURE
    deadline: float | None = None


@dataclass(slots=True)
class ConnectionEstablisher:
    """Builds clients from a factory and dials them per transport policy."""

    factory: RemoteClientFactory | None = None
    datagramTimeout: float = DATAGRAM_DIAL_TIMEOUT

    # datagram dials that lost the race and haven't finished yet
    orphans: set[asyncio.Task] = field(default_factory=set)

    async def dial(self, client: RemoteClient, attempt: ConnectAttempt) -> None:
        match attempt.transport:
            case Transport.DATAGRAM:
                await self._dialDatagram(client, attempt)
            case Transport.PLAIN:
                await self._dialPlain(client, attempt.address)
            case Transport.SECURE:
                await self._dialSecure(client, attempt.address)

    async def _dialSecure(self, client: RemoteClient, address: str) -> None:
        try:
            await client.connectSecure(address, skipVerify=True)
            logger.info("[{}] Connected (secure)", address)
            return
        except END_OF_STREAM as e:
            logger.info(
                "[{}] Peer closed stream during secure handshake ({}), trying plain...",
                address,
                type(e).__name__,
            )
        except Exception as e:
            raise HandshakeFailure(f"{address}: {e}") from e

        await self._dialPlain(client, address)

    async def _dialPlain(self, client: RemoteClient, address: str) -> None:
        try:
            await client.connectPlain(address)
        except Exception as e:
            raise DialFailure(f"{address}: {e}") from e

        logger.info("[{}] Connected (plain)", address)

    async def _dialDatagram(self, client: RemoteClient, attempt: ConnectAttempt) -> None:
        deadline = self.datagramTimeout if attempt.deadline is None else attempt.deadline
        dialer = asyncio.create_task(
            client.connectReliableDatagram(attempt.address),
            name=f"datagram dial {attempt.address}",
        )

        # asyncio.wait() doesn't cancel on timeout; the dial keeps running
        done, _ = await asyncio.wait({dialer}, timeout=deadline)

        if not done:
            self.orphans.add(dialer)
            dialer.add_done_callback(lambda t: self._discardLate(t, client, attempt.address))
            raise ConnectTimeout(f"{attempt.address}: no answer after {deadline:,.1f}s")

        if err := dialer.exception():
            raise DialFailure(f"{attempt.address}: {err}") from err

        logger.info("[{}] Connected (datagram)", attempt.address)

    def _discardLate(self, task: asyncio.Task, client: RemoteClient, address: str) -> None:
        self.orphans.discard(task)

        if task.cancelled():
            return

        if err := task.exception():
            logger.debug("[{}] Late datagram dial failed after timeout: {}", address, err)
            return

        # nobody owns this client anymore; don't leave a connection open behind the session
        logger.warning("[{}] Late datagram dial succeeded after timeout, discarding", address)
        try:
            client.disconnect()
        except Exception as e:
            logger.debug("[{}] Discarded client disconnect failed: {}", address, e)

    def newClient(self, session: Session) -> RemoteClient:
        if not self.factory:
            raise DialFailure(
                "no remote client factory configured (use --client-factory or PITCLI_CLIENT_FACTORY)"
            )

        if session.mode is SerializationMode.SCHEMA:
            logger.info("Using schema-based client")
            return self.factory.schemaClient(session.docs)

        logger.info("Using json client")
        return self.factory.jsonClient()

    async def connect(self, session: Session, attempt: ConnectAttempt, sink: Sink) -> RemoteClient:
        """Full connect command: fresh client, dial, install into session.

        The session is only touched after the dial succeeded, so any failure
        leaves it exactly as it was.
        """
        if session.isConnected():
            raise AlreadyConnected("disconnect before connecting again")

        if not attempt.address:
            raise InvalidArguments("no address given")

        client = self.newClient(session)

        if session.mode is SerializationMode.SCHEMA:
            schemaClient = cast(SchemaRemoteClient, client)
            for route, typeTag in session.pushRegistry.items():
                schemaClient.addPushResponse(route, typeTag)

            try:
                await schemaClient.loadServerInfo(attempt.address)
            except Exception as e:
                raise ServerInfoFailure(f"{attempt.address}: {e}") from e

        await self.dial(client, attempt)

        session.beginConnection(client, sink, attempt.address)
        return client
