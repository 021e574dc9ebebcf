"""Command: disconnect

Category: Connection
"""

from dataclasses import dataclass

from loguru import logger

from pitcli.cmds.base import IOp, command


@command(names=["disconnect"])
@dataclass
class IOpDisconnect(IOp):
    """Disconnect from the server and stop printing server messages."""

    async def run(self):
        address = self.session.address
        if not self.session.endConnection():
            logger.info("Not connected.")
            return

        logger.info("[{}] Disconnected.", address)
