"""Shared fixtures — an app wired to a fake Xtream provider."""

import httpx
import pytest
from starlette.testclient import TestClient

from app.main import create_app
from app.services.config_service import ConfigService

PROVIDER = "http://provider.example:8080"


class FakeProvider:
    """Answers player_api.php calls from canned payloads and records them."""

    def __init__(self):
        self.auth = {
            "user_info": {"username": "alice", "auth": 1, "status": "Active"},
            "server_info": {"url": "provider.example", "port": "8080", "timezone": "UTC"},
        }
        self.categories = [
            {"category_id": "1", "category_name": "Sports", "parent_id": 0},
            {"category_id": "2", "category_name": "News", "parent_id": 0},
            {"category_id": "3", "category_name": "  ", "parent_id": 0},
            {"category_id": "4", "category_name": "Éducation", "parent_id": 0},
        ]
        self.streams = [
            {"num": 1, "name": "Sky Sports", "stream_id": 101, "stream_icon": "http://logo/1.png",
             "epg_channel_id": "sky.uk", "category_id": "1"},
            {"num": 2, "name": "BBC News", "stream_id": 102, "stream_icon": "",
             "epg_channel_id": None, "category_id": "2"},
            {"num": 3, "name": "Eurosport", "stream_id": 103, "stream_icon": "",
             "epg_channel_id": "", "category_id": "1"},
        ]
        self.failures: dict = {}
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        action = request.url.params.get("action", "auth")
        self.calls.append(action)
        if action in self.failures:
            failure = self.failures[action]
            if isinstance(failure, Exception):
                raise failure
            return httpx.Response(failure)
        payload = {
            "auth": self.auth,
            "get_live_categories": self.categories,
            "get_live_streams": self.streams,
        }[action]
        return httpx.Response(200, json=payload)


@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def config_service(tmp_path):
    cfg = ConfigService(str(tmp_path), environ={})
    cfg.load()
    return cfg


@pytest.fixture()
def client(provider, config_service):
    app = create_app(config_service, transport=httpx.MockTransport(provider.handler))
    with TestClient(app) as c:
        yield c
