"""Read-only listing endpoints used by the web front end."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import or_, select

from xuul.database import Database
from xuul.models import Apilist, FriendLink


def _state(request: Request) -> Any:
    return request.app.state.xuul


_State = Annotated[Any, Depends(_state)]


def get_all_api_lists(db: Database) -> list[dict[str, Any]]:
    """Every API entry, ordered by id."""
    with db.session() as session:
        rows = session.scalars(select(Apilist).order_by(Apilist.id))
        return [row.to_dict() for row in rows]


def search_api_lists(db: Database, q: str | None) -> list[dict[str, Any]]:
    """API entries whose name, path or introduction contains ``q``.

    An absent or empty query matches nothing.
    """
    if not q:
        return []
    statement = (
        select(Apilist)
        .where(
            or_(
                Apilist.name.contains(q),
                Apilist.path.contains(q),
                Apilist.introduce.contains(q),
            )
        )
        .order_by(Apilist.id)
    )
    with db.session() as session:
        return [row.to_dict() for row in session.scalars(statement)]


def get_api_list_by_id(db: Database, id: int) -> dict[str, Any] | None:
    """The API entry with primary key ``id``, or None."""
    row = db.find_by_id(Apilist, id)
    return None if row is None else row.to_dict()


def get_all_links(db: Database) -> list[dict[str, Any]]:
    """Approved friend links, ordered by id."""
    statement = (
        select(FriendLink).where(FriendLink.is_approved.is_(True)).order_by(FriendLink.id)
    )
    with db.session() as session:
        return [row.to_dict() for row in session.scalars(statement)]


def create_frontend_router() -> APIRouter:
    """Routes for the API catalogue and the friend links."""
    router = APIRouter()

    @router.get("/api-list")
    def _all_api_lists(state: _State) -> list[dict[str, Any]]:
        return get_all_api_lists(state.db)

    # Registered before the id route so that "search" is not taken for an id.
    @router.get("/api-list/search")
    def _search_api_lists(state: _State, q: str | None = None) -> list[dict[str, Any]]:
        return search_api_lists(state.db, q)

    @router.get("/api-list/{id}")
    def _api_list_by_id(id: int, state: _State) -> Any:
        entry = get_api_list_by_id(state.db, id)
        if entry is None:
            return Response(status_code=404)
        return entry

    @router.get("/friend-links")
    def _all_links(state: _State) -> list[dict[str, Any]]:
        return get_all_links(state.db)

    return router