#!/usr/bin/env python3

original_print = print
import asyncio
import logging
import os
import pathlib
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Final

import questionary
import whenever
from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory, ThreadedHistory
from prompt_toolkit.shortcuts import set_title

from pitcli import cmds
from pitcli.completer import CommandCompleter
from pitcli.engine.clients import loadClientFactory
from pitcli.engine.connector import ConnectionEstablisher
from pitcli.engine.errors import SessionError
from pitcli.engine.primitives import split_commands
from pitcli.engine.session import Session

LOG_LEVELS: Final = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")

# descriptions shown by 'set' with no value
SETTINGS_HELP: Final = {
    "loglevel": "console log level",
    "bigerror": "print full tracebacks for command errors",
}


def defaultHistoryPath() -> str:
    return os.getenv("PITCLI_HISTORY_PATH") or os.path.expanduser("~/.pitcli_history")


@dataclass(slots=True)
class RemoteCmdlineApp:
    # schema/documentation source for schema-based servers (empty means json)
    docs: str = field(default_factory=lambda: os.getenv("PITCLI_DOCS", ""))

    # 'module:attribute' of the remote client factory
    clientFactory: str = field(default_factory=lambda: os.getenv("PITCLI_CLIENT_FACTORY", ""))

    historyPath: str = field(default_factory=defaultHistoryPath)
    logLevel: str = field(default_factory=lambda: os.getenv("PITCLI_LOGLEVEL", "INFO").upper())
    logDir: str = field(default_factory=lambda: os.getenv("PITCLI_LOGDIR", "runlogs"))

    # where inbound 'server says: ...' lines are written
    output: Callable[[str], None] = print

    session: Session = field(init=False)
    establisher: ConnectionEstablisher = field(init=False)
    dispatch: cmds.Dispatch = field(default_factory=cmds.Dispatch)

    # runtime settings changed with 'set' / 'unset'
    localvars: dict[str, str] = field(default_factory=dict)

    # for completion
    recentAddresses: list[str] = field(default_factory=list)
    recentRoutes: set[str] = field(default_factory=set)

    exiting: bool = False

    # Console log handler (set by setupLogging, used by setConsoleLogLevel)
    _console_handler_id: int = field(init=False, default=0)
    _console_sink: Any = field(init=False, default=None)

    def __post_init__(self) -> None:
        self.setupLogging()

        self.session = Session(docs=self.docs)
        self.establisher = ConnectionEstablisher(
            loadClientFactory(self.clientFactory) if self.clientFactory else None
        )

        self.localvars["loglevel"] = self.logLevel

    def setupLogging(self) -> None:
        # Client libraries using stdlib logging write to their own file.
        # If the wire protocol misbehaves in ways the console doesn't show,
        # check that file first.
        now = whenever.Instant.now().py_datetime()
        LOGDIR = pathlib.Path(self.logDir) / f"{now.year}" / f"{now.month:02}"
        LOGDIR.mkdir(exist_ok=True, parents=True)
        LOG_FILE_TEMPLATE = str(LOGDIR / f"pitcli-{now:%Y-%m-%dT%H-%M-%S}")

        logging.basicConfig(
            level=logging.INFO,
            filename=LOG_FILE_TEMPLATE + "-client.log",
            format="%(asctime)s %(message)s",
        )

        def asink(x):
            # don't use print_formatted_text() because it doesn't respect the
            # patch_stdout() context the whole runtime is wrapped in, and the
            # prompt gets torn apart by async log lines.
            original_print(x, end="")

        logger.remove()
        self._console_sink = asink
        self._console_handler_id = logger.add(asink, colorize=True, level=self.logLevel)

        logger.info("Logging session with prefix: {}", LOG_FILE_TEMPLATE)

        # operator input is logged at TRACE so it only lands in the files
        logger.add(sink=LOG_FILE_TEMPLATE + "-pitcli.log", level="TRACE", colorize=False)
        logger.add(sink=LOG_FILE_TEMPLATE + "-pitcli-color.log", level="TRACE", colorize=True)

    def setConsoleLogLevel(self, level: str) -> None:
        """Change the console log level at runtime.

        Removes the current console handler and re-adds it at the new level."""
        logger.remove(self._console_handler_id)
        self._console_handler_id = logger.add(self._console_sink, colorize=True, level=level)
        logger.info("Console log level set to {}", level)

    def updateGlobalStateVariable(self, key: str, val: str | None) -> None:
        # 'val' of None means just print the settings, while 'val' of empty string means delete the key.

        if val is None:
            if key.lower() == "info":
                logger.info("PITCLI environment variables:")
                for k, v in sorted(os.environ.items()):
                    if k.startswith("PITCLI_"):
                        logger.info("  {} = {}", k, v)

            logger.info("Settings:")
            for k in sorted(set(self.localvars) | set(SETTINGS_HELP)):
                logger.info(
                    "  {:<12} = {:<8} {}", k, self.localvars.get(k, "off"), SETTINGS_HELP.get(k, "")
                )

            return

        original = self.localvars.get(key)

        if val:
            if key.lower() == "loglevel":
                level = val.upper()
                if level not in LOG_LEVELS:
                    logger.error("Invalid log level '{}'. Valid: {}", val, ", ".join(LOG_LEVELS))
                    return

                self.setConsoleLogLevel(level)
                self.localvars[key] = level
                return

            self.localvars[key] = val
        else:
            self.localvars.pop(key, None)

        if original and not val:
            logger.info("UNSET: {} (previously: {})", key, original)
        elif original:
            logger.info("SET: {} = {} (previously: {})", key, val, original)
        else:
            logger.info("SET: {} = {}", key, val)

    def serverSays(self, line: str) -> None:
        """Output sink for the inbound message pump."""
        logger.trace(line)
        self.output(line)

    async def ask(self, prompt: str) -> str | None:
        return await questionary.text(prompt).ask_async()

    def remember(self, address: str | None = None, route: str | None = None) -> None:
        if address and address not in self.recentAddresses:
            self.recentAddresses.append(address)

        if route:
            self.recentRoutes.add(route)

    def levelName(self) -> str:
        if self.session.isConnected():
            return self.session.address

        return "disconnected"

    def bottomToolbar(self):
        session = self.session
        if session.isConnected() and session.pump:
            state = f"<b>connected</b> {session.address} :: {session.pump.forwarded:,} server messages"
        else:
            state = "<b>disconnected</b>"

        pushes = f" :: {len(session.pushRegistry)} push types" if session.pushRegistry else ""
        return HTML(f"{state} :: {session.mode.value}{pushes}")

    def _printHelpWithDescriptions(self):
        """Print all commands grouped by category with their docstrings."""
        for category, names in self.dispatch.byCategory().items():
            original_print(f"\n{category}:")
            for name in names:
                cls = self.dispatch.ops[name]
                doc = (cls.__doc__ or "").strip().split("\n")[0]
                original_print(f"  {cls.usage():32s} {doc}")

        original_print("\nOther:")
        original_print(f"  {'? / help':32s} Show this list")
        original_print(f"  {'exit / quit':32s} Leave (also Ctrl-D)")

    async def runSingleCommand(self, cmd, rest):
        _t0 = time.perf_counter()
        try:
            try:
                await self.dispatch.runop(cmd, rest[0] if rest else None, self)
            except SessionError as e:
                # expected operator-facing failures never need a traceback
                logger.error("[{}] {}", cmd, e)
            except Exception as e:
                if self.localvars.get("bigerror"):
                    err = logger.exception
                else:
                    logger.warning(
                        "Using small exception printer. 'set bigerror yes' to enable full stack trace messages."
                    )
                    err = logger.error

                err("[{}] Error with command: {}", [cmd] + rest or [], e)
        finally:
            logger.debug("[{}] Duration: {:,.4f}", cmd, time.perf_counter() - _t0)

    def buildRunnablesFromCommandRequest(self, text1) -> list[Awaitable[None]]:
        # Commands can be:
        #  > COMMAND
        #  > COMMAND1; COMMAND2
        #  > COMMAND # Comment about command
        # Semicolons inside double quotes don't split, so JSON payloads pass through intact.
        # Commands always run one after another, never concurrently.
        runnables: list[Awaitable[None]] = []

        for ccmd in split_commands(text1):
            # if the split generated empty entries (like running ;;;;), just skip the command
            if not ccmd:
                continue

            cmd, *rest = ccmd.split(" ", 1)

            if cmd in {"?", "help"}:
                self._printHelpWithDescriptions()
                continue

            if cmd in {"exit", "quit"}:
                self.exiting = True
                break

            runnables.append(self.runSingleCommand(cmd, rest))

        return runnables

    async def buildAndRun(self, text1):
        for run in self.buildRunnablesFromCommandRequest(text1):
            await run

    async def dorepl(self):
        completer = CommandCompleter(self)
        session: PromptSession = PromptSession(
            history=ThreadedHistory(FileHistory(self.historyPath)),
            auto_suggest=AutoSuggestFromHistory(),
            completer=completer,
        )

        # The Command Processing REPL
        while not self.exiting:
            try:
                text1 = await session.prompt_async(
                    f"{self.levelName()}> ",
                    enable_history_search=True,
                    bottom_toolbar=self.bottomToolbar,
                    refresh_interval=1,
                    complete_while_typing=True,
                    search_ignore_case=True,
                )

                # log user input to our active logfile(s)
                logger.trace("{}> {}", self.levelName(), text1)

                await self.buildAndRun(text1)
            except KeyboardInterrupt:
                # Control-C pressed. Try again.
                continue
            except EOFError:
                # Control-D pressed
                logger.error("Exiting...")
                self.exiting = True
                break

    async def runall(self):
        logger.info("pitcli REPL client ({} serialization)", self.session.mode.value)
        set_title("pitcli")

        try:
            while not self.exiting:
                try:
                    await self.dorepl()
                except Exception:
                    logger.exception("Uncaught exception in repl? Restarting...")
                    continue
        finally:
            await self.stop()

    async def stop(self):
        self.exiting = True
        self.session.endConnection()

        # pumps were signalled above; give them a moment to notice
        try:
            await asyncio.wait_for(self.session.drain(), timeout=1)
        except asyncio.TimeoutError:
            logger.warning("Inbound pump didn't stop in time")
