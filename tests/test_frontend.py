from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from xuul.database import Database
from xuul.frontend import (
    create_frontend_router,
    get_all_api_lists,
    get_all_links,
    get_api_list_by_id,
    search_api_lists,
)
from xuul.models import Apilist, Base, FriendLink


@pytest.fixture
def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'front.db'}")
    Base.metadata.create_all(database.engine)
    with database.session() as session:
        session.add_all(
            [
                Apilist(id=2, name="weather", path="/weather", introduce="天气查询"),
                Apilist(id=1, name="bing", path="/bing", introduce="必应美图"),
                Apilist(
                    id=3,
                    name="hot",
                    path="/hot_search",
                    introduce=None,
                    request_parameters={"q": "string"},
                ),
                FriendLink(
                    id=5,
                    name="second",
                    url="https://second.example.com",
                    email="second@example.com",
                    icon="b.png",
                    description="B",
                    is_approved=True,
                ),
                FriendLink(
                    id=4,
                    name="first",
                    url="https://first.example.com",
                    email=None,
                    icon="a.png",
                    description="A",
                    is_approved=True,
                ),
                FriendLink(
                    id=6,
                    name="pending",
                    url="https://pending.example.com",
                    email="pending@example.com",
                    icon="c.png",
                    description="C",
                    is_approved=False,
                ),
            ]
        )
        session.commit()
    yield database
    database.engine.dispose()


@pytest.fixture
def client(db):
    app = FastAPI()
    app.include_router(create_frontend_router(), prefix="/api/v1")
    app.state.xuul = SimpleNamespace(db=db)
    return TestClient(app)


def test_all_api_lists_ordered_by_id(db):
    entries = get_all_api_lists(db)
    assert [entry["id"] for entry in entries] == [1, 2, 3]


def test_api_list_serialises_request_parameters_under_wire_name(db):
    entries = get_all_api_lists(db)
    assert entries[2]["requestParameters"] == {"q": "string"}
    assert entries[0]["requestParameters"] is None


@pytest.mark.parametrize(
    "query, expected_ids",
    [("weather", [2]), ("/hot", [3]), ("必应", [1]), ("e", [2, 3])],
)
def test_search_matches_name_path_or_introduce(db, query, expected_ids):
    assert [entry["id"] for entry in search_api_lists(db, query)] == expected_ids


@pytest.mark.parametrize("query", [None, ""])
def test_search_without_query_is_empty(db, query):
    assert search_api_lists(db, query) == []


def test_get_by_id(db):
    entry = get_api_list_by_id(db, 2)
    assert entry["name"] == "weather"
    assert entry["path"] == "/weather"


def test_get_by_missing_id(db):
    assert get_api_list_by_id(db, 99) is None


def test_links_only_approved_and_ordered(db):
    links = get_all_links(db)
    assert [link["name"] for link in links] == ["first", "second"]
    assert all(link["is_approved"] for link in links)


def test_route_all_api_lists(client):
    response = client.get("/api/v1/api-list")
    assert response.status_code == 200
    assert [entry["id"] for entry in response.json()] == [1, 2, 3]


def test_route_search_is_not_taken_for_an_id(client):
    response = client.get("/api/v1/api-list/search", params={"q": "bing"})
    assert response.status_code == 200
    assert [entry["name"] for entry in response.json()] == ["bing"]


def test_route_search_without_query(client):
    response = client.get("/api/v1/api-list/search")
    assert response.json() == []


def test_route_by_id(client):
    response = client.get("/api/v1/api-list/3")
    assert response.json()["path"] == "/hot_search"


def test_route_missing_id_is_404_without_body(client):
    response = client.get("/api/v1/api-list/99")
    assert response.status_code == 404
    assert response.content == b""


def test_route_friend_links(client):
    response = client.get("/api/v1/friend-links")
    assert [link["url"] for link in response.json()] == [
        "https://first.example.com",
        "https://second.example.com",
    ]