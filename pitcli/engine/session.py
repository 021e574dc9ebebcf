"""The single client session and the rules for what is legal when."""
from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field

from loguru import logger

from pitcli.engine.errors import AlreadyConnected, InvalidState, NotApplicable, NotConnected
from pitcli.engine.protocols import RemoteClient
from pitcli.engine.pump import DisconnectSignal, InboundPump, Sink


class SerializationMode(enum.Enum):
    JSON = "json"
    SCHEMA = "schema"


@dataclass(slots=True)
class Session:
    """Connection state shared by every command.

    Only the foreground command flow writes these fields. The running pump
    holds its own references to the client queue and signal it started with
    and never reads back through the session.
    """

    # schema/documentation source; non-empty selects schema-based mode
    docs: str = ""

    mode: SerializationMode = field(init=False)

    remote: RemoteClient | None = None
    address: str = ""

    # route -> push decode type, handed to schema clients at connect time
    pushRegistry: dict[str, str] = field(default_factory=dict)

    signal: DisconnectSignal | None = None
    pump: InboundPump | None = None

    # pump tasks still alive (including ones signalled but not yet exited)
    tasks: set[asyncio.Task] = field(default_factory=set)

    connects: int = 0

    def __post_init__(self) -> None:
        self.mode = SerializationMode.SCHEMA if self.docs else SerializationMode.JSON

    def isConnected(self) -> bool:
        remote = self.remote
        return remote is not None and remote.connectedStatus()

    def requireConnected(self) -> RemoteClient:
        remote = self.remote
        if remote is None or not remote.connectedStatus():
            raise NotConnected("connect to a server first")

        return remote

    def beginConnection(self, remote: RemoteClient, sink: Sink, address: str = "") -> InboundPump:
        """Install a freshly connected client and start its inbound pump."""
        if self.isConnected():
            raise AlreadyConnected("disconnect before connecting again")

        # the server dropped the previous connection on its own, so nobody
        # signalled that pump yet
        if self.signal:
            self.signal.fire()

        self.connects += 1
        self.remote = remote
        self.address = address
        self.signal = DisconnectSignal()
        self.pump = InboundPump(
            remote.inbound(), self.signal, sink, name=f"inbound pump {self.connects}"
        )

        task = self.pump.start()
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

        logger.debug("[{}] Session started", self.pump.name)
        return self.pump

    def endConnection(self) -> bool:
        """Signal the pump and disconnect the client.

        Returns False (and does nothing) if there is no live connection.
        On return the pump has been signalled but may not have exited yet.
        """
        if not self.isConnected():
            return False

        # detach first so a failing client disconnect can't leave us half-connected;
        # the old pump keeps its own signal and a new connect gets a new one
        remote, self.remote = self.remote, None
        signal, self.signal = self.signal, None
        address, self.address = self.address, ""
        self.pump = None

        assert remote and signal
        signal.fire()

        try:
            remote.disconnect()
        except Exception as e:
            logger.warning("[{}] Client disconnect failed: {}", address, e)

        return True

    def registerPush(self, route: str, typeTag: str) -> None:
        if self.isConnected():
            raise InvalidState("register pushes before connecting")

        if self.mode is not SerializationMode.SCHEMA:
            raise NotApplicable("push types only apply to schema-based servers")

        self.pushRegistry[route] = typeTag

    async def drain(self) -> None:
        """Wait for every pump task to finish (used at exit)."""
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
