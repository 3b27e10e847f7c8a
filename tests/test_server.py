import asyncio
from dataclasses import replace
from pathlib import Path
from types import SimpleNamespace

import websockets

from sitecraft.build import write_content
from sitecraft.models import ContentState
from sitecraft.server import PreviewServer, _ChangeHandler, inject_reload_script
from sitecraft.starters import create_empty_site_content


def create_project(tmp_path: Path, config: str = "") -> Path:
    content = create_empty_site_content("site", "en", "2024-01-01T00:00:00Z")
    write_content(tmp_path / "content.yaml", replace(content, state=ContentState.PUBLISHED))
    (tmp_path / "sitecraft.yaml").write_text(config, encoding="utf-8")
    return tmp_path


def test_ports_default_from_config(tmp_path):
    project = create_project(tmp_path, "port: 5000\n")
    server = PreviewServer(project)
    assert server.http_port == 5000
    assert server.ws_port == 5001


def test_ws_port_from_config(tmp_path):
    project = create_project(tmp_path, "port: 5000\nws_port: 6000\n")
    assert PreviewServer(project).ws_port == 6000


def test_cli_port_overrides_config(tmp_path):
    project = create_project(tmp_path, "port: 5000\nws_port: 6000\n")
    server = PreviewServer(project, http_port=7000)
    assert server.http_port == 7000
    assert server.ws_port == 7001
    assert PreviewServer(project, http_port=7000, ws_port=7100).ws_port == 7100


def test_is_ignored(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    assert server.is_ignored(project / "output" / "index.html")
    assert server.is_ignored(project / "output.staging" / "index.html")
    assert server.is_ignored(project / ".git" / "HEAD")
    assert not server.is_ignored(project / "content.yaml")
    assert not server.is_ignored(Path("/elsewhere/file.txt"))


def test_change_handler_skips_ignored_paths(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    calls = []
    server.rebuild = lambda: calls.append(True)
    handler = _ChangeHandler(server)

    handler.on_any_event(
        SimpleNamespace(is_directory=False, src_path=str(project / "output" / "a.html"))
    )
    handler.on_any_event(SimpleNamespace(is_directory=True, src_path=str(project / "layouts")))
    assert calls == []

    handler.on_any_event(SimpleNamespace(is_directory=False, src_path=str(project / "content.yaml")))
    assert calls == [True]


def test_inject_reload_script():
    assert inject_reload_script("<body>x</body>", "<s/>") == "<body>x<s/></body>"
    assert inject_reload_script("plain", "<s/>") == "plain<s/>"


def test_build_swaps_staging_into_output(tmp_path):
    project = create_project(tmp_path)
    stale = project / "output" / "stale.html"
    stale.parent.mkdir()
    stale.write_text("old", encoding="utf-8")

    server = PreviewServer(project)
    assert server._build()
    assert (project / "output" / "index.html").exists()
    assert not stale.exists()
    assert not (project / "output.staging").exists()


def test_failed_build_keeps_previous_output(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    assert server._build()

    (project / "content.yaml").write_text("id: ''\n", encoding="utf-8")
    assert not server._build()
    assert (project / "output" / "index.html").exists()
    assert not (project / "output.staging").exists()


def test_rebuild_is_debounced(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    assert server.rebuild()
    # second call inside the debounce window is dropped
    assert not server.rebuild()


def test_broadcast_drops_closed_clients(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    sent = []

    class GoodClient:
        async def send(self, message):
            sent.append(message)

    class ClosedClient:
        async def send(self, message):
            raise websockets.ConnectionClosed(None, None)

    good, closed = GoodClient(), ClosedClient()
    server._ws_clients = {good, closed}
    asyncio.run(server._async_broadcast('{"type": "reload"}'))
    assert sent == ['{"type": "reload"}']
    assert server._ws_clients == {good}


def test_broadcast_survives_clients_leaving_mid_send(tmp_path):
    project = create_project(tmp_path)
    server = PreviewServer(project)
    sent = []

    class Client:
        def __init__(self, name):
            self.name = name

        async def send(self, message):
            sent.append(self.name)
            # a handler's finally block drops disconnected clients meanwhile
            for other in list(server._ws_clients):
                if other is not self:
                    server._ws_clients.discard(other)

    server._ws_clients = {Client("a"), Client("b")}
    asyncio.run(server._async_broadcast("reload"))
    assert len(sent) == 2
    assert server._ws_clients == set()
