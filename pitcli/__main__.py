"""Entry point: ``pitcli`` / ``python -m pitcli``."""

import asyncio
import sys

import click
from loguru import logger
from prompt_toolkit.patch_stdout import patch_stdout

from pitcli.cli import RemoteCmdlineApp, defaultHistoryPath


@click.command()
@click.option(
    "--docs",
    envvar="PITCLI_DOCS",
    default="",
    help="Schema/documentation route of the server; enables schema-based (protobuf) mode",
)
@click.option(
    "--client-factory",
    envvar="PITCLI_CLIENT_FACTORY",
    default="",
    help="Remote client implementation as 'module:attribute'",
)
@click.option(
    "--history",
    envvar="PITCLI_HISTORY_PATH",
    default=defaultHistoryPath,
    help="Command history file (default: ~/.pitcli_history)",
)
@click.option(
    "--log-level",
    envvar="PITCLI_LOGLEVEL",
    default="INFO",
    type=click.Choice(["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Console log level",
)
def main(docs: str, client_factory: str, history: str, log_level: str) -> None:
    """Interactive REPL client for a remote application server."""
    try:
        app = RemoteCmdlineApp(
            docs=docs,
            clientFactory=client_factory,
            historyPath=history,
            logLevel=log_level.upper(),
        )
    except (ImportError, AttributeError, TypeError, ValueError) as e:
        logger.error("Can't load remote client factory {!r}: {}", client_factory, e)
        sys.exit(1)

    # patch_stdout keeps server messages and log lines above the prompt
    with patch_stdout():
        try:
            asyncio.run(app.runall())
        except KeyboardInterrupt:
            logger.warning("Goodbye.")


if __name__ == "__main__":
    main()
