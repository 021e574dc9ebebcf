"""Tests for command registration, lookup, and argument binding (pitcli/cmds)."""

from dataclasses import dataclass, field

import pytest

from pitcli import cmds
from pitcli.cmds.base import Arg, IOp
from pitcli.engine.errors import InvalidArguments, UnknownCommand


@pytest.fixture
def dispatch():
    return cmds.Dispatch()


class TestRegistry:
    def test_all_commands_registered(self, dispatch):
        assert set(dispatch.ops) == {
            "connect",
            "connectkcp",
            "disconnect",
            "request",
            "notify",
            "push",
            "status",
            "set",
            "unset",
        }

    def test_categories(self, dispatch):
        groups = dispatch.byCategory()
        assert groups["Connection"] == ["connect", "connectkcp", "disconnect"]
        assert groups["Messaging"] == ["notify", "push", "request"]

    def test_every_command_has_a_description(self, dispatch):
        for name, cls in dispatch.ops.items():
            assert cls.__doc__ and cls.__doc__.strip(), name


class TestResolve:
    def test_exact_match_beats_longer_prefix(self, dispatch):
        assert dispatch.resolve("connect")[0] == "connect"

    def test_unique_prefix(self, dispatch):
        assert dispatch.resolve("disc")[0] == "disconnect"
        assert dispatch.resolve("req")[0] == "request"

    def test_case_insensitive(self, dispatch):
        assert dispatch.resolve("NOTIFY")[0] == "notify"

    def test_ambiguous(self, dispatch):
        with pytest.raises(UnknownCommand, match="ambiguous"):
            dispatch.resolve("s")

    def test_unknown(self, dispatch):
        with pytest.raises(UnknownCommand):
            dispatch.resolve("frobnicate")


@dataclass
class FakeOp(IOp):
    """Stand-in command exercising every argument kind."""

    name: str = field(init=False)
    count: int | None = field(init=False)
    rest: list[str] = field(init=False)

    def argmap(self):
        return [Arg("name"), Arg("?count", convert=int), Arg("*rest")]


@dataclass
class StrictOp(IOp):
    """Two required arguments, nothing more."""

    route: str = field(init=False)
    typeTag: str = field(init=False)

    def argmap(self):
        return [Arg("route"), Arg("typeTag")]


class TestBind:
    def test_all_kinds(self):
        op = FakeOp(oargs__="alpha 3 x y")
        op.bind()
        assert (op.name, op.count, op.rest) == ("alpha", 3, ["x", "y"])

    def test_optional_missing(self):
        op = FakeOp(oargs__="alpha")
        op.bind()
        assert (op.name, op.count, op.rest) == ("alpha", None, [])

    def test_required_missing(self):
        with pytest.raises(InvalidArguments, match="<name>"):
            FakeOp(oargs__=None).bind()

    def test_bad_conversion(self):
        with pytest.raises(InvalidArguments, match="count"):
            FakeOp(oargs__="alpha three").bind()

    def test_extra_words_rejected(self):
        with pytest.raises(InvalidArguments, match="unexpected"):
            StrictOp(oargs__="room.onjoin protos.Join extra").bind()

    def test_usage(self):
        assert cmds.Dispatch().ops["push"].usage() == "push <route> <typeTag>"
        assert cmds.Dispatch().ops["connect"].usage() == "connect [address]"
        assert cmds.Dispatch().ops["request"].usage() == "request <route> [payload]"
