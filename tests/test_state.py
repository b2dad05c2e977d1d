import httpx
import pytest

from xuul.cache import RedisCache
from xuul.config import ConfigError
from xuul.database import Database
from xuul.http_client import HttpClient
from xuul.models import Base, DataCosImage
from xuul.state import AppState, create_state


class FakeRedis:
    def __init__(self):
        self.closed = False

    async def aclose(self):
        self.closed = True


def test_create_state_requires_db_config(monkeypatch):
    for key in ["DB_USERNAME", "DB_PASSWORD", "DB_HOST", "DB_PORT", "DB_DATABASE"]:
        monkeypatch.setenv(key, "x")
        monkeypatch.delenv(key)
    with pytest.raises(ConfigError):
        create_state()


@pytest.mark.asyncio
async def test_state_holds_and_closes_resources(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'state.db'}")
    Base.metadata.create_all(db.engine)
    fake = FakeRedis()
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"n": 1}))
    state = AppState(
        db=db,
        http=HttpClient(httpx.AsyncClient(transport=transport)),
        redis=RedisCache(fake),
    )
    assert await state.http.get_json("https://example.com") == {"n": 1}
    assert state.db.get_max_id(DataCosImage) is None

    await state.aclose()
    assert state.http.client.is_closed
    assert fake.closed is True