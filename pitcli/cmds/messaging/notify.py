"""Command: notify

Category: Messaging
"""

from dataclasses import dataclass, field

from loguru import logger

from pitcli.cmds.base import Arg, IOp, command
from pitcli.engine.errors import InvalidArguments
from pitcli.engine.primitives import split_route


@command(names=["notify"])
@dataclass
class IOpNotify(IOp):
    """Send a fire-and-forget notify to a route (no response expected)."""

    words: list[str] = field(init=False)

    def argmap(self):
        return [Arg("*words", desc="route then payload")]

    async def run(self):
        remote = self.session.requireConnected()

        route, payload = split_route(self.oargs__)
        if not route:
            raise InvalidArguments(f"usage: {self.usage()}")

        await remote.sendNotify(route, payload)
        self.state.remember(route=route)
        logger.debug("[{}] Notified ({:,} bytes)", route, len(payload))

    @classmethod
    def usage(cls) -> str:
        return "notify <route> [payload]"
