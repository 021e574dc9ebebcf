"""Pure helpers for turning operator input into commands (no dependencies)."""

from __future__ import annotations


def split_commands(text):
    """A helper for splitting in-quote commands delimited by semicolons.

    We can't just split the whole string by semicolons because we have to respect the string boundaries
    if there are quoted elements (JSON payloads are full of them), so we iterate character by character.

    A '#' outside quotes at the start of the line or after whitespace begins a comment
    running to the end of the line; inside quotes it is payload.
    """
    commands = []
    current_command = ""
    in_quotes = False
    escape_next = False
    previous = " "

    for char in text.strip():
        if escape_next:
            current_command += char
            escape_next = False
        elif char == "\\":
            current_command += char
            escape_next = True
        elif char == '"':
            current_command += char
            in_quotes = not in_quotes
        elif char == "#" and not in_quotes and previous.isspace():
            break
        elif char == ";" and not in_quotes:
            commands.append(current_command.strip())
            current_command = ""
        else:
            current_command += char

        previous = char

    if current_command.strip():
        commands.append(current_command.strip())

    return commands


def split_route(rest: str | None) -> tuple[str, bytes]:
    """Split 'route [payload...]' into the route and the raw payload bytes.

    The payload is everything after the route, untouched apart from trimming,
    so JSON with spaces inside strings arrives as typed.
    """
    route, _, payload = (rest or "").strip().partition(" ")
    return route, payload.strip().encode()
