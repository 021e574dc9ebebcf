"""End-to-end operator sessions driven through the command line runner.

Each test types commands exactly as an operator would and checks what
reaches the output and the log.
"""

import pytest

from tests.fakes import FakeClientFactory, settle

ADDR = "127.0.0.1:3250"


class TestOperatorSession:
    @pytest.mark.asyncio
    async def test_full_json_session(self, make_app, establisher, said, log_capture):
        establisher.factory = factory = FakeClientFactory(secureError=EOFError("tls not spoken here"))
        app = make_app(docs="")

        await app.buildAndRun(f"connect {ADDR}")
        client = factory.last
        assert client.calls == [("secure", ADDR, True), ("plain", ADDR)]
        assert "Connected (plain)" in log_capture.getvalue()

        client.responses["room.join"] = b'{"code": 200, "msg": "joined"}'
        await app.buildAndRun("request room.join {}")
        assert '[room.join] {"code": 200, "msg": "joined"}' in log_capture.getvalue()

        client.say('{"route": "room.onjoin", "who": "another player"}')
        client.say("second")
        await settle()
        assert said == [
            'server says: {"route": "room.onjoin", "who": "another player"}',
            "server says: second",
        ]

        await app.buildAndRun("disconnect")
        assert f"[{ADDR}] Disconnected." in log_capture.getvalue()
        assert client.disconnects == 1

        client.say("too late")
        await settle()
        assert said[-1] == "server says: second"

        await app.buildAndRun("request room.join {}")
        assert "not-connected" in log_capture.getvalue()
        assert client.calls[-1] == ("request", "room.join", b"{}")

        await app.stop()
        assert app.session.tasks == set()

    @pytest.mark.asyncio
    async def test_reconnect_after_server_drop(self, app, factory, said):
        await app.buildAndRun(f"connect {ADDR}")
        first = factory.last
        first.say("one")
        await settle()

        first.drop()
        assert not app.session.isConnected()

        await app.buildAndRun(f"connect {ADDR}")
        second = factory.last
        assert second is not first

        first.say("stale")
        second.say("two")
        await settle()
        assert said == ["server says: one", "server says: two"]

        await app.stop()
        assert app.session.tasks == set()

    @pytest.mark.asyncio
    async def test_multiple_commands_on_one_line(self, app, factory, log_capture):
        await app.buildAndRun(
            f'connect {ADDR}; notify chat.say {{"text": "a; b"}}; request room.leave # bye'
        )

        assert factory.last.calls[1:] == [
            ("notify", "chat.say", b'{"text": "a; b"}'),
            ("request", "room.leave", b""),
        ]

        await app.stop()

    @pytest.mark.asyncio
    async def test_schema_session(self, make_app, factory, said, log_capture):
        app = make_app(docs="connector.getprotos")

        await app.buildAndRun("push room.onjoin protos.Join; push room.onleave protos.Leave")
        await app.buildAndRun(f"connect {ADDR}")

        client = factory.last
        assert client.docs == "connector.getprotos"
        assert client.pushes == {"room.onjoin": "protos.Join", "room.onleave": "protos.Leave"}
        assert ("serverinfo", ADDR) in client.calls

        await app.buildAndRun("push room.onchat protos.Chat")
        assert "invalid-state" in log_capture.getvalue()

        await app.buildAndRun("disconnect; push room.onchat protos.Chat")
        assert app.session.pushRegistry["room.onchat"] == "protos.Chat"

        await app.stop()

    @pytest.mark.asyncio
    async def test_schema_server_info_failure(self, make_app, establisher, log_capture):
        establisher.factory = FakeClientFactory(serverInfoError=RuntimeError("no docs route"))
        app = make_app(docs="connector.getprotos")

        await app.buildAndRun(f"connect {ADDR}")

        assert "server-info-failure" in log_capture.getvalue()
        assert not app.session.isConnected()

    @pytest.mark.asyncio
    async def test_connect_without_factory(self, app, establisher, log_capture):
        establisher.factory = None

        await app.buildAndRun(f"connect {ADDR}")

        assert "dial-failure" in log_capture.getvalue()
        assert not app.session.isConnected()
