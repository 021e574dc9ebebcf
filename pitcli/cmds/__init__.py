"""Operator commands and the dispatcher that runs them.

Importing this package imports every command module so each one registers
itself in ``base.REGISTRY``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from pitcli.cmds.base import REGISTRY, IOp
from pitcli.cmds.connection import connect, connectkcp, disconnect  # noqa: F401
from pitcli.cmds.messaging import notify, push, request  # noqa: F401
from pitcli.cmds.utilities import setvar, status, unsetvar  # noqa: F401
from pitcli.engine.errors import UnknownCommand


class Dispatch:
    """Resolve (possibly abbreviated) command names and run them."""

    def __init__(self) -> None:
        self.ops: dict[str, type[IOp]] = dict(REGISTRY)

    def resolve(self, cmd: str) -> tuple[str, type[IOp]]:
        cmd = cmd.lower()
        if cmd in self.ops:
            return cmd, self.ops[cmd]

        matches = sorted(name for name in self.ops if name.startswith(cmd))
        if len(matches) == 1:
            return matches[0], self.ops[matches[0]]

        if matches:
            raise UnknownCommand(f"{cmd!r} is ambiguous: {', '.join(matches)}")

        raise UnknownCommand(f"{cmd!r} (try '?' for a list of commands)")

    def byCategory(self) -> dict[str, list[str]]:
        groups: dict[str, list[str]] = defaultdict(list)
        for name, cls in self.ops.items():
            groups[cls.__module__.split(".")[-2].title()].append(name)

        return {k: sorted(v) for k, v in sorted(groups.items())}

    async def runop(self, cmd: str, args: str | None, state: Any) -> Any:
        _, cls = self.resolve(cmd)
        op = cls(state=state, oargs__=args)
        op.bind()
        return await op.run()
