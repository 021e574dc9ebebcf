"""Command autocompletion for the REPL.

Provides completion for command names (with docstring descriptions) and
context-aware argument completion (addresses, routes, settings).
"""

from prompt_toolkit.completion import Completer, Completion

from pitcli.engine.errors import UnknownCommand


class CommandCompleter(Completer):
    """Completer for pitcli commands and their arguments."""

    # Map resolved command names to argument completer method names
    _ARG_COMPLETERS = {
        "connect": "_complete_addresses",
        "connectkcp": "_complete_addresses",
        "request": "_complete_routes",
        "notify": "_complete_routes",
        "push": "_complete_push_routes",
        "set": "_complete_set_keys",
        "unset": "_complete_set_keys",
    }

    # Known value sets for specific localvar keys
    _SET_VALUE_COMPLETIONS = {
        "loglevel": ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        "bigerror": ["yes"],
    }

    def __init__(self, app):
        """app is the RemoteCmdlineApp instance."""
        self.app = app

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor

        # Handle multi-command: only complete the text after the last ";"
        last_semi = text.rfind(";")
        segment = text[last_semi + 1 :].lstrip() if last_semi >= 0 else text

        parts = segment.split(None, 1)  # split on first whitespace
        if len(parts) <= 1 and not segment.endswith(" "):
            # Still typing the command name
            yield from self._complete_command_name(parts[0] if parts else "")
        else:
            arg_text = parts[1] if len(parts) > 1 else ""
            yield from self._complete_arguments(parts[0], arg_text)

    def _complete_command_name(self, prefix):
        prefix_lower = prefix.lower()
        for cmd_name, cls in sorted(self.app.dispatch.ops.items()):
            if cmd_name.startswith(prefix_lower):
                doc = (cls.__doc__ or "").strip().split("\n")[0]
                yield Completion(cmd_name, start_position=-len(prefix), display_meta=doc)

    def _complete_arguments(self, cmd_name, arg_text):
        try:
            resolved, _ = self.app.dispatch.resolve(cmd_name)
        except UnknownCommand:
            return

        method_name = self._ARG_COMPLETERS.get(resolved)
        if not method_name:
            return

        words = arg_text.split()

        # only the first argument is completed; payloads are free text
        if len(words) > 1 or (words and arg_text.endswith(" ")):
            if resolved == "set":
                yield from self._complete_set_values(words, arg_text)

            return

        current_word = words[-1] if words and not arg_text.endswith(" ") else ""
        yield from getattr(self, method_name)(current_word)

    def _complete_addresses(self, prefix):
        for addr in self.app.recentAddresses:
            if addr.startswith(prefix):
                yield Completion(addr, start_position=-len(prefix))

    def _complete_routes(self, prefix):
        routes = set(self.app.recentRoutes) | set(self.app.session.pushRegistry)
        for route in sorted(routes):
            if route.startswith(prefix):
                yield Completion(route, start_position=-len(prefix))

    def _complete_push_routes(self, prefix):
        for route, typeTag in sorted(self.app.session.pushRegistry.items()):
            if route.startswith(prefix):
                yield Completion(route, start_position=-len(prefix), display_meta=typeTag)

    def _complete_set_keys(self, prefix):
        if "info".startswith(prefix.lower()):
            yield Completion(
                "info", start_position=-len(prefix), display_meta="Show PITCLI_ environment variables"
            )

        for key in sorted(set(self.app.localvars) | set(self._SET_VALUE_COMPLETIONS)):
            if key.lower().startswith(prefix.lower()):
                val = self.app.localvars.get(key, "off")
                yield Completion(key, start_position=-len(prefix), display_meta=str(val))

    def _complete_set_values(self, words, arg_text):
        # second position only, and only for keys with known values
        if len(words) > 2 or (len(words) == 2 and arg_text.endswith(" ")):
            return

        prefix = words[1] if len(words) == 2 else ""
        for val in self._SET_VALUE_COMPLETIONS.get(words[0].lower(), []):
            if val.lower().startswith(prefix.lower()):
                yield Completion(val, start_position=-len(prefix))
