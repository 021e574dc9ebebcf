"""Command: status

Category: Utilities
"""

from dataclasses import dataclass

from loguru import logger

from pitcli.cmds.base import IOp, command


@command(names=["status"])
@dataclass
class IOpStatus(IOp):
    """Show connection state, serialization mode, and registered push types."""

    async def run(self):
        session = self.session
        if session.isConnected():
            assert session.pump
            logger.info(
                "Connected to {} ({:,} server messages so far)",
                session.address,
                session.pump.forwarded,
            )
        else:
            logger.info("Not connected.")

        logger.info("Serialization: {}", session.mode.value)

        for route, typeTag in sorted(session.pushRegistry.items()):
            logger.info("Push: {} -> {}", route, typeTag)
