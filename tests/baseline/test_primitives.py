"""Tests for input helpers (pitcli/engine/primitives.py)."""

from pitcli.engine.primitives import split_commands, split_route


class TestSplitCommands:
    def test_single(self):
        assert split_commands("status") == ["status"]

    def test_semicolons(self):
        assert split_commands("connect 127.0.0.1:3250; status") == [
            "connect 127.0.0.1:3250",
            "status",
        ]

    def test_semicolon_inside_quotes_is_kept(self):
        assert split_commands('request chat.say {"text": "a;b"}; status') == [
            'request chat.say {"text": "a;b"}',
            "status",
        ]

    def test_trailing_comment_removed(self):
        assert split_commands("disconnect # done for today") == ["disconnect"]

    def test_hash_without_leading_space_survives(self):
        assert split_commands('notify chat.say {"tag":"#general"}') == [
            'notify chat.say {"tag":"#general"}'
        ]

    def test_hash_inside_quotes_is_payload(self):
        assert split_commands('request r {"m": "a #1"}') == ['request r {"m": "a #1"}']

    def test_comment_after_closing_quote(self):
        assert split_commands('request r {"m": "a #1"} # join room one; status') == [
            'request r {"m": "a #1"}'
        ]

    def test_comment_only_line(self):
        assert split_commands("# nothing to run") == []

    def test_escaped_quote_keeps_hash_in_payload(self):
        assert split_commands(r'notify r {"m": "say \"hi\" #1"}') == [
            r'notify r {"m": "say \"hi\" #1"}'
        ]

    def test_empty_entries(self):
        assert [c for c in split_commands(";;status;;") if c] == ["status"]


class TestSplitRoute:
    def test_route_only(self):
        assert split_route("room.leave") == ("room.leave", b"")

    def test_payload_kept_verbatim(self):
        assert split_route('room.join  {"name": "some player"} ') == (
            "room.join",
            b'{"name": "some player"}',
        )

    def test_nothing(self):
        assert split_route(None) == ("", b"")
        assert split_route("   ") == ("", b"")
