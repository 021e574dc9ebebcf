"""pitcli engine layer: session lifecycle with no UI dependency.

Modules
-------
protocols
    Interfaces of the remote client collaborator (wire protocol lives elsewhere).
    - ``RemoteClient``, ``SchemaRemoteClient``, ``RemoteClientFactory``
    - ``Message``: one inbound payload

errors
    ``SessionError`` and its subclasses, each with a stable ``code``.

pump
    - ``DisconnectSignal``: one-shot stop signal, fresh per connection
    - ``InboundPump``: forwards inbound messages as "server says: ..." until signalled

session
    - ``Session``: current client handle, push registry, serialization mode
    - ``SerializationMode``: JSON or SCHEMA, fixed at startup

connector
    - ``ConnectionEstablisher``: secure-with-plain-fallback and datagram-with-timeout dials
    - ``Transport``, ``ConnectAttempt``

clients
    - ``loadClientFactory``: import a factory from a 'module:attribute' path

primitives
    - ``split_commands``, ``split_route``: operator input helpers
"""

from pitcli.engine.connector import ConnectAttempt, ConnectionEstablisher, Transport
from pitcli.engine.errors import SessionError
from pitcli.engine.protocols import Message, RemoteClient, RemoteClientFactory
from pitcli.engine.session import SerializationMode, Session

__all__ = [
    "ConnectAttempt",
    "ConnectionEstablisher",
    "Transport",
    "SessionError",
    "Message",
    "RemoteClient",
    "RemoteClientFactory",
    "SerializationMode",
    "Session",
]
