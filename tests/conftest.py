"""
Pytest configuration and fixtures
"""
import os
import socket
import tempfile
from types import SimpleNamespace

import aiohttp
import pytest
from aiohttp import web
from aiohttp.abc import AbstractResolver
from aiohttp.test_utils import TestServer

# Settings are cached on first use, so the environment must be ready before
# any studio module is imported.
_tmp_dir = tempfile.mkdtemp(prefix="studio-test-")
os.environ.setdefault("DB_URL", f"sqlite+aiosqlite:///{_tmp_dir}/studio.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ.setdefault("SESSION_SECRET", "test-secret")
os.environ.setdefault("STATIC_DIR", os.path.join(_tmp_dir, "no-static"))
os.environ.setdefault("OIDC_ISSUER", "")

import fakeredis.aioredis  # noqa: E402

from studio_core.llm.client import ContentGenerator  # noqa: E402
from studio_core.models.content import GeneratedContent  # noqa: E402
from studio_core.models.user import User  # noqa: E402


# ──────────────────────────────────────────────
# LLM stubs
# ──────────────────────────────────────────────

class FakeCompletions:
    """Stands in for `client.chat.completions`; replays queued answers."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.responses:
            raise AssertionError("Unexpected LLM call")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        message = SimpleNamespace(content=item, refusal=None)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeLLM:
    def __init__(self, *responses):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)
        self.closed = False

    async def close(self):
        self.closed = True


def make_generator(*responses) -> tuple[ContentGenerator, FakeLLM]:
    llm = FakeLLM(*responses)
    return ContentGenerator(llm, "main-model", "fast-model"), llm


ANALYSIS_JSON = (
    '{"summary": "AI is changing how teams work.", '
    '"keyInsights": ["Models process data fast", "Decisions improve", "Costs drop"], '
    '"interestingFacts": ["Seconds, not days", "Adoption doubled"]}'
)
HASHTAGS_JSON = '{"hashtags": ["#AI", "machinelearning", "#ai", "future of work"]}'


@pytest.fixture
def sample_content() -> GeneratedContent:
    return GeneratedContent(
        summary="AI is changing how teams work.",
        key_insights=["Models process data fast", "Decisions improve"],
        interesting_facts=["Seconds, not days"],
    )


# ──────────────────────────────────────────────
# aiohttp stubs
# ──────────────────────────────────────────────

class FakeStream:
    """Stands in for aiohttp.StreamReader; hands the body out in small pieces."""

    def __init__(self, raw: bytes, piece: int = 64):
        self._raw = raw
        self._piece = piece

    async def iter_chunked(self, n: int):
        step = min(n, self._piece)
        for i in range(0, len(self._raw), step):
            yield self._raw[i:i + step]


class FakeResponse:
    def __init__(self, status=200, body="", headers=None, reason="OK", charset="utf-8"):
        self.status = status
        self.reason = reason
        self.charset = charset
        self.headers = headers if headers is not None else {"Content-Type": "text/html; charset=utf-8"}
        raw = body.encode("utf-8") if isinstance(body, str) else body
        self.content = FakeStream(raw)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Minimal aiohttp.ClientSession: maps URL → FakeResponse."""

    def __init__(self, responses: dict[str, FakeResponse] | None = None):
        self.responses = responses or {}
        self.requested: list[str] = []

    def get(self, url, **kwargs):
        self.requested.append(url)
        if url not in self.responses:
            raise aiohttp.ClientConnectionError(f"Cannot connect to {url}")
        return self.responses[url]

    async def close(self):
        pass


class StaticResolver(AbstractResolver):
    """Resolves every host name to one fixed IPv4 address."""

    def __init__(self, address: str):
        self.address = address
        self.lookups: list[str] = []

    async def resolve(self, host, port=0, family=socket.AF_INET):
        self.lookups.append(host)
        return [{
            "hostname": host,
            "host": self.address,
            "port": port,
            "family": socket.AF_INET,
            "proto": 0,
            "flags": socket.AI_NUMERICHOST,
        }]

    async def close(self):
        pass


@pytest.fixture
async def serve():
    """Start real aiohttp servers on 127.0.0.1; returns `start(app) -> TestServer`."""
    servers: list[TestServer] = []

    async def start(app: web.Application) -> TestServer:
        server = TestServer(app, host="127.0.0.1")
        await server.start_server()
        servers.append(server)
        return server

    yield start
    for server in servers:
        await server.close()


# ──────────────────────────────────────────────
# Redis / API client
# ──────────────────────────────────────────────

@pytest.fixture
def fake_redis():
    return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def test_user() -> User:
    return User(id="user-1", email="ada@example.com", first_name="Ada", last_name="Lovelace")


@pytest.fixture
def api(fake_redis):
    """TestClient with Redis replaced by fakeredis. Nobody is signed in."""
    from fastapi.testclient import TestClient

    from studio_api import deps
    from studio_api.main import app

    app.dependency_overrides[deps.get_redis] = lambda: fake_redis
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in(api, test_user):
    """Same client, with `test_user` signed in."""
    from studio_api import deps
    from studio_api.main import app

    app.dependency_overrides[deps.require_user] = lambda: test_user
    return api


@pytest.fixture
def use_generator():
    """Install a ContentGenerator backed by queued fake LLM answers."""
    from studio_api import deps
    from studio_api.main import app

    def install(*responses) -> FakeLLM:
        generator, llm = make_generator(*responses)
        app.dependency_overrides[deps.get_generator] = lambda: generator
        return llm

    return install
