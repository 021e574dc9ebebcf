"""Command: connect

Category: Connection
"""

from dataclasses import dataclass, field
from typing import ClassVar

from loguru import logger

from pitcli.cmds.base import Arg, IOp, command
from pitcli.engine.connector import ConnectAttempt, Transport
from pitcli.engine.errors import AlreadyConnected


@command(names=["connect"])
@dataclass
class IOpConnect(IOp):
    """Connect to a server (secure stream, falling back to plain).

    If the address is omitted you are prompted for it."""

    transport: ClassVar[Transport] = Transport.SECURE

    address: str | None = field(init=False)

    def argmap(self):
        return [Arg("?address", desc="host:port of the server")]

    async def run(self):
        # checked before prompting so we don't ask for an address we won't use
        if self.session.isConnected():
            raise AlreadyConnected("disconnect before connecting again")

        address = self.address or await self.state.ask("address:") or ""

        await self.state.establisher.connect(
            self.session,
            ConnectAttempt(address.strip(), self.transport),
            self.state.serverSays,
        )

        self.state.remember(address=address)
        logger.info("[{}] connected!", address)
