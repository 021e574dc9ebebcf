"""Session error taxonomy.

Every failure a command can report is a ``SessionError`` carrying a stable
``code`` string. None of these are fatal: the REPL logs them and keeps
accepting commands.
"""

from __future__ import annotations

from typing import ClassVar


class SessionError(Exception):
    """Base class for all operator-facing session errors."""

    code: ClassVar[str] = "session-error"

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.code}: {msg}" if msg else self.code


class AlreadyConnected(SessionError):
    code = "already-connected"


class NotConnected(SessionError):
    code = "not-connected"


class HandshakeFailure(SessionError):
    """Secure handshake failed for a reason other than end-of-stream."""

    code = "handshake-failure"


class DialFailure(SessionError):
    code = "dial-failure"


class ConnectTimeout(SessionError):
    code = "timeout"


class ServerInfoFailure(SessionError):
    """Schema-based client could not load server info before connecting."""

    code = "server-info-failure"


class NotApplicable(SessionError):
    """Operation only makes sense in schema-based serialization mode."""

    code = "not-applicable"


class InvalidState(SessionError):
    code = "invalid-state"


class InvalidArguments(SessionError):
    code = "invalid-arguments"


class UnknownCommand(SessionError):
    code = "unknown-command"
