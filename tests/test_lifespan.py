"""
Application lifespan tests.
"""

from types import SimpleNamespace

import pytest
from fastapi import FastAPI

import app.api.main as main


class FailingLLMClient:
    def __init__(self, **kwargs):
        pass

    async def close(self):
        raise RuntimeError("close failed")


class RecordingHTTPClient:
    instances: list["RecordingHTTPClient"] = []

    def __init__(self, **kwargs):
        self.closed = False
        RecordingHTTPClient.instances.append(self)

    async def aclose(self):
        self.closed = True


class RecordingDatabase:
    instances: list["RecordingDatabase"] = []

    def __init__(self, url, **kwargs):
        self.disposed = False
        RecordingDatabase.instances.append(self)

    async def create_all(self):
        pass

    async def dispose(self):
        self.disposed = True


@pytest.mark.asyncio
async def test_shutdown_releases_everything_when_a_close_fails(monkeypatch):
    monkeypatch.setattr(main, "GroqClient", FailingLLMClient)
    monkeypatch.setattr(main, "httpx", SimpleNamespace(AsyncClient=RecordingHTTPClient))
    monkeypatch.setattr(main, "Database", RecordingDatabase)
    monkeypatch.setattr(main, "initialize_firebase", lambda: None)
    monkeypatch.setattr(main, "init_sentry", lambda: None)
    RecordingHTTPClient.instances.clear()
    RecordingDatabase.instances.clear()

    application = FastAPI()
    with pytest.raises(RuntimeError, match="close failed"):
        async with main.lifespan(application):
            assert application.state.agent is not None

    assert RecordingHTTPClient.instances[0].closed is True
    assert RecordingDatabase.instances[0].disposed is True
