import asyncio
import json
import httpx
from app.console.directory import DirectoryConfigurator
from app.console.view import InfoPanel
from helpers import mock_client

SERVER_INFO = {"ips": ["192.168.1.20", "10.0.0.5"], "port": 8080, "dir": "/srv/uploads"}

def run_with(handler, operation, panel=None):
    panel = panel or InfoPanel()

    async def run():
        async with mock_client(handler) as client:
            return await operation(DirectoryConfigurator(client, panel))
    return asyncio.run(run()), panel

def test_fetch_info_replaces_panel():
    outcome, panel = run_with(
        lambda request: httpx.Response(200, json=SERVER_INFO),
        lambda configurator: configurator.fetch_info(),
    )

    assert outcome.ok
    assert outcome.value.port == 8080
    assert panel.info_text == "IPs: 192.168.1.20, 10.0.0.5 Port: 8080"
    assert panel.dir_input == "/srv/uploads"

def test_fetch_info_failure_leaves_panel_unchanged():
    panel = InfoPanel()
    panel.info_text = "IPs: 127.0.0.1 Port: 8080"
    panel.dir_input = "/old"

    outcome, panel = run_with(
        lambda request: httpx.Response(500),
        lambda configurator: configurator.fetch_info(),
        panel,
    )

    assert not outcome.ok
    assert outcome.status_code == 500
    assert panel.info_text == "IPs: 127.0.0.1 Port: 8080"
    assert panel.dir_input == "/old"

def test_fetch_info_transport_error_leaves_panel_unchanged():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    outcome, panel = run_with(handler, lambda configurator: configurator.fetch_info())

    assert not outcome.ok
    assert panel.info_text == ""
    assert panel.dir_input == ""

def test_fetch_info_invalid_body_leaves_panel_unchanged():
    outcome, panel = run_with(
        lambda request: httpx.Response(200, json={"ips": "nope"}),
        lambda configurator: configurator.fetch_info(),
    )

    assert not outcome.ok
    assert panel.dir_input == ""

def test_set_directory_posts_and_refetches():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={**SERVER_INFO, "dir": "/new/path"})

    outcome, panel = run_with(handler, lambda configurator: configurator.set_directory("/new/path"))

    assert outcome.ok
    assert [(r.method, r.url.path) for r in requests] == [("POST", "/set_dir"), ("GET", "/info")]
    assert json.loads(requests[0].content) == {"dir": "/new/path"}
    assert panel.dir_input == "/new/path"

def test_set_directory_shows_directory_reported_by_server():
    def handler(request):
        if request.url.path == "/set_dir":
            return httpx.Response(200)
        return httpx.Response(200, json={**SERVER_INFO, "dir": "/resolved/new/path"})

    outcome, panel = run_with(handler, lambda configurator: configurator.set_directory("~/new/path"))

    assert outcome.ok
    assert panel.dir_input == "/resolved/new/path"

def test_failed_set_directory_still_refetches_and_shows_server_value():
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.path == "/set_dir":
            return httpx.Response(400, json={"detail": "not a directory"})
        return httpx.Response(200, json=SERVER_INFO)

    panel = InfoPanel()
    panel.dir_input = "/new/path"
    outcome, panel = run_with(handler, lambda configurator: configurator.set_directory("/new/path"), panel)

    assert not outcome.ok
    assert outcome.status_code == 400
    assert [r.url.path for r in requests] == ["/set_dir", "/info"]
    assert panel.dir_input == "/srv/uploads"

def test_set_directory_transport_error_still_refetches():
    requests = []

    def handler(request):
        requests.append(request.url.path)
        if request.url.path == "/set_dir":
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json=SERVER_INFO)

    outcome, panel = run_with(handler, lambda configurator: configurator.set_directory("/x"))

    assert not outcome.ok
    assert requests == ["/set_dir", "/info"]
    assert panel.dir_input == "/srv/uploads"
