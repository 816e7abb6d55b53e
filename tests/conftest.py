import io

import pytest
import requests

from jeeves import config

ENV_VARS = [
    "OPENAI_API_KEY",
    "JEEVES_OPENAI_MODEL",
    "JEEVES_LOG_LEVEL",
    "JEEVES_OPENAI_API_URL",
    "JEEVES_TIMEOUT",
    "LANGFUSE_PUBLIC_KEY",
    "LANGFUSE_SECRET_KEY",
    "LANGFUSE_HOST",
]


class BrokenBody:
    def read(self, *args, **kwargs):
        raise requests.exceptions.ChunkedEncodingError("connection broken")

    def close(self):
        pass


class FakeSession(requests.Session):
    """Session that records requests instead of sending them."""

    def __init__(self, status_code=200, body=b"", error=None, read_error=False):
        super().__init__()
        self.status_code = status_code
        self.body = body
        self.error = error
        self.read_error = read_error
        self.sent = []

    def send(self, request, **kwargs):
        self.sent.append((request, kwargs))
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = self.status_code
        response.raw = BrokenBody() if self.read_error else io.BytesIO(self.body)
        response.request = request
        return response


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Never pick up a developer's .env file
    monkeypatch.setattr(config, "load_dotenv", lambda **kwargs: False)


@pytest.fixture
def fake_session(monkeypatch):
    """Install a FakeSession as the session every request goes through."""

    def install(**kwargs):
        session = FakeSession(**kwargs)
        monkeypatch.setattr(requests, "Session", lambda: session)
        return session

    return install
