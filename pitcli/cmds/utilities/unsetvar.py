"""Command: unset

Category: Utilities
"""

from dataclasses import dataclass, field

from pitcli.cmds.base import Arg, IOp, command


@command(names=["unset"])
@dataclass
class IOpUnSetEnvironment(IOp):
    """Remove a runtime setting."""

    key: str = field(init=False)

    def argmap(self):
        return [Arg("key")]

    async def run(self):
        self.state.updateGlobalStateVariable(self.key, "")
