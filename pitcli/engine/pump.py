"""Inbound message pump and its per-connection disconnect signal."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from loguru import logger

from pitcli.engine.protocols import Message

Sink = Callable[[str], None]


@dataclass(slots=True, eq=False)
class DisconnectSignal:
    """One-shot notification that tells exactly one pump to stop.

    A new signal is created for every successful connect and is never reused
    across reconnects, so a pump can only ever be stopped by the disconnect
    that belongs to its own connection.
    """

    event: asyncio.Event = field(default_factory=asyncio.Event)
    closed: bool = False

    @property
    def fired(self) -> bool:
        return self.event.is_set()

    def fire(self) -> None:
        # repeated fires collapse into one; the consumer only ever sees it once
        if not self.closed:
            self.event.set()

    async def wait(self) -> None:
        await self.event.wait()

    def close(self) -> None:
        assert not self.closed, "disconnect signal consumed twice"
        self.closed = True


def formatMessage(msg: Message) -> str:
    return "server says: " + msg.payload.decode(errors="replace")


@dataclass(slots=True)
class InboundPump:
    """Forward every message from one client's inbound queue to a sink.

    The pump is bound to the (queue, signal) pair it was created with. It runs
    until its signal fires; anything still buffered in the queue at that point
    is left there, not drained.
    """

    inbound: asyncio.Queue[Message]
    signal: DisconnectSignal
    sink: Sink
    name: str = "pump"

    # count of forwarded messages (for status and tests)
    forwarded: int = 0

    async def run(self) -> None:
        stopper = asyncio.ensure_future(self.signal.wait())
        getter: asyncio.Future[Message] | None = None

        try:
            while True:
                getter = asyncio.ensure_future(self.inbound.get())
                await asyncio.wait(
                    {getter, stopper}, return_when=asyncio.FIRST_COMPLETED
                )

                # disconnect wins ties: once signalled, nothing else is printed
                if stopper.done():
                    break

                self.sink(formatMessage(getter.result()))
                self.forwarded += 1
                getter = None
        finally:
            if getter and not getter.done():
                getter.cancel()

            if not stopper.done():
                stopper.cancel()

        self.signal.close()
        logger.debug("[{}] Stopped after {:,} messages", self.name, self.forwarded)

    def start(self) -> asyncio.Task[None]:
        return asyncio.create_task(self.run(), name=self.name)
