"""Command: set

Category: Utilities
"""

from dataclasses import dataclass, field

from pitcli.cmds.base import Arg, IOp, command


@command(names=["set"])
@dataclass
class IOpSetEnvironment(IOp):
    """Set a runtime setting (loglevel, bigerror), or list them all with no arguments.

    Examples:
      set loglevel DEBUG
      set bigerror yes"""

    key: str | None = field(init=False)
    val: str | None = field(init=False)

    def argmap(self):
        return [Arg("?key"), Arg("?val")]

    async def run(self):
        self.state.updateGlobalStateVariable(self.key or "", self.val)
