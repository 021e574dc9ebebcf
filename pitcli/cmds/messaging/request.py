"""Command: request

Category: Messaging
"""

from dataclasses import dataclass, field

from loguru import logger

from pitcli.cmds.base import Arg, IOp, command
from pitcli.engine.errors import InvalidArguments
from pitcli.engine.primitives import split_route


@command(names=["request"])
@dataclass
class IOpRequest(IOp):
    """Send a request to a route and print the response.

    The payload is everything after the route, sent exactly as typed:
        request room.join {"name": "some player"}"""

    words: list[str] = field(init=False)

    def argmap(self):
        # payload is taken raw from oargs__ so quoting and spacing survive
        return [Arg("*words", desc="route then payload")]

    async def run(self):
        remote = self.session.requireConnected()

        route, payload = split_route(self.oargs__)
        if not route:
            raise InvalidArguments(f"usage: {self.usage()}")

        response = await remote.sendRequest(route, payload)
        self.state.remember(route=route)

        logger.info("[{}] {}", route, response.decode(errors="replace"))
        return response

    @classmethod
    def usage(cls) -> str:
        return "request <route> [payload]"
