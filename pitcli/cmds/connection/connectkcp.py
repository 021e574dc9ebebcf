"""Command: connectkcp

Category: Connection
"""

from dataclasses import dataclass
from typing import ClassVar

from pitcli.cmds.base import command
from pitcli.cmds.connection.connect import IOpConnect
from pitcli.engine.connector import Transport


@command(names=["connectkcp"])
@dataclass
class IOpConnectKCP(IOpConnect):
    """Connect to a server over reliable UDP (KCP), giving up after 3 seconds."""

    transport: ClassVar[Transport] = Transport.DATAGRAM
