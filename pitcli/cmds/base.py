"""Command base class, argument binding, and the command registry.

Every command is a dataclass subclassing ``IOp`` and registered with
``@command(names=[...])``. The dispatcher creates a new instance per
invocation, binds the typed arguments declared by ``argmap()`` onto the
instance fields, then awaits ``run()``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pitcli.engine.errors import InvalidArguments

if TYPE_CHECKING:
    from pitcli.cli import RemoteCmdlineApp
    from pitcli.engine.session import Session

# command name -> command class (filled at import time by @command)
REGISTRY: dict[str, type[IOp]] = {}


@dataclass(slots=True, frozen=True)
class Arg:
    """One positional argument.

    ``name`` is the field to populate. Prefix with ``?`` for an optional
    argument (None when absent) or ``*`` to collect all remaining words.
    """

    name: str
    desc: str = ""
    convert: Callable[[Any], Any] | None = None

    @property
    def field(self) -> str:
        return self.name.lstrip("?*")

    @property
    def optional(self) -> bool:
        return self.name[0] == "?"

    @property
    def variadic(self) -> bool:
        return self.name[0] == "*"

    def usage(self) -> str:
        if self.variadic:
            return f"[{self.field}...]"

        if self.optional:
            return f"[{self.field}]"

        return f"<{self.field}>"


@dataclass
class IOp:
    """Base for all commands."""

    state: RemoteCmdlineApp = None  # type: ignore

    # raw argument text exactly as typed after the command name
    oargs__: str | None = None

    @property
    def session(self) -> Session:
        return self.state.session

    def argmap(self) -> list[Arg]:
        return []

    @classmethod
    def usage(cls) -> str:
        name = getattr(cls, "names__", [cls.__name__])[0]
        return " ".join([name] + [a.usage() for a in cls().argmap()])

    def bind(self) -> None:
        """Populate argument fields from ``oargs__``."""
        words = (self.oargs__ or "").split()
        declared = self.argmap()

        for arg in declared:
            if arg.variadic:
                val: Any = words
                words = []
            elif words:
                val = words.pop(0)
            elif arg.optional:
                val = None
            else:
                raise InvalidArguments(f"missing {arg.usage()}; usage: {self.usage()}")

            if arg.convert and val is not None:
                try:
                    val = arg.convert(val)
                except ValueError as e:
                    raise InvalidArguments(f"{arg.field}: {e}") from e

            setattr(self, arg.field, val)

        if words and all(not a.variadic for a in declared):
            raise InvalidArguments(f"unexpected {' '.join(words)!r}; usage: {self.usage()}")

    async def run(self):
        raise NotImplementedError


def command(names: list[str]):
    """Register an IOp class under each of ``names``."""

    def register(cls: type[IOp]) -> type[IOp]:
        cls.names__ = names  # type: ignore
        for name in names:
            assert name not in REGISTRY, f"Duplicate command name: {name}"
            REGISTRY[name] = cls

        return cls

    return register
