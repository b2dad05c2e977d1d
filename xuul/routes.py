"""Routes of the public API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from xuul import endpoints, hashing
from xuul import hot_search as hot
from xuul import weather as forecast
from xuul import website_info as site
from xuul.response import JsonResponse

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def _state(request: Request) -> Any:
    return request.app.state.xuul


_State = Annotated[Any, Depends(_state)]


def _render(response: JsonResponse) -> JSONResponse:
    return JSONResponse(
        response.to_dict(), status_code=response.code, media_type=JSON_MEDIA_TYPE
    )


def create_api_router() -> APIRouter:
    """All public API endpoints."""
    router = APIRouter()

    @router.get("/bing")
    async def _bing(state: _State) -> JSONResponse:
        return _render(await endpoints.bing(state))

    @router.get("/fanyi")
    async def _fanyi(state: _State, text: str) -> JSONResponse:
        return _render(await endpoints.fanyi(state, text))

    @router.get("/changya")
    async def _changya(state: _State) -> JSONResponse:
        return _render(await endpoints.changya(state))

    @router.get("/cos")
    async def _cos(
        state: _State, cos_image: bool | None = None, cos_video: bool | None = None
    ) -> JSONResponse:
        return _render(await endpoints.cos(state, cos_image, cos_video))

    @router.get("/yiyan")
    async def _yiyan() -> JSONResponse:
        return _render(endpoints.yiyan())

    @router.get("/everyday_60s")
    async def _everyday_60s(state: _State) -> JSONResponse:
        return _render(await endpoints.everyday_60s(state))

    @router.get("/hot_search")
    async def _hot_search(state: _State, q: str) -> JSONResponse:
        return _render(await hot.hot_search(state, q))

    @router.get("/qrcode")
    async def _qrcode(
        state: _State,
        q: str,
        color: str | None = None,
        bgcolor: str | None = None,
        size: str | None = None,
    ) -> Response:
        image = await endpoints.qrcode(state, q, color, bgcolor, size)
        return Response(content=image, media_type=endpoints.QRCODE_MEDIA_TYPE)

    @router.get("/ys_kaci")
    async def _ys_kaci(state: _State) -> JSONResponse:
        return _render(await endpoints.ys_kaci(state))

    @router.get("/website_info")
    async def _website_info(state: _State, url: str) -> JSONResponse:
        return _render(await site.website_info(state, url))

    @router.get("/ip")
    async def _ip(request: Request, state: _State, ip: str | None = None) -> JSONResponse:
        return _render(await endpoints.ip(state, ip, request.headers))

    @router.get("/encryption")
    async def _encryption(
        md5: str | None = None,
        sha256: str | None = None,
        sha384: str | None = None,
        sha512: str | None = None,
    ) -> JSONResponse:
        return _render(hashing.encryption(md5, sha256, sha384, sha512))

    @router.get("/mishe_cos")
    async def _mishe_cos(
        state: _State,
        top: bool | None = None,
        new: bool | None = None,
        posts: bool | None = None,
    ) -> JSONResponse:
        return _render(await endpoints.mishe_cos(state, top, new, posts))

    @router.get("/weather")
    async def _weather(state: _State, q: str) -> JSONResponse:
        return _render(await forecast.weather(state, q))

    return router