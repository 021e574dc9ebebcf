"""Command: push

Category: Messaging
"""

from dataclasses import dataclass, field

from loguru import logger

from pitcli.cmds.base import Arg, IOp, command


@command(names=["push"])
@dataclass
class IOpPush(IOp):
    """Declare the message type of pushes on a route (schema servers, before connect)."""

    route: str = field(init=False)
    typeTag: str = field(init=False)

    def argmap(self):
        return [Arg("route"), Arg("typeTag", desc="schema type name of the push payload")]

    async def run(self):
        self.session.registerPush(self.route, self.typeTag)
        logger.info("[{}] Pushes decode as: {}", self.route, self.typeTag)
