"""Seven-day weather forecast for a Chinese region."""

from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup
from bs4.element import Tag

from xuul.response import InternalError, JsonResponse, NotFound, success

TITLE = "天气查询"
CITY_INDEX_URL = "https://weather.cma.cn/api/map/weather/1"
CITY_PAGE_URL = "https://weather.cma.cn/web/weather/{}.html"
CITY_CACHE_KEY = "weathersss"

SUFFIXES = ("市", "县", "区", "自治州", "旗", "自治县", "市辖区", "特区", "林区")


def remove_suffix(region: str) -> str:
    """Strip the first administrative suffix, in the order of SUFFIXES, that ends ``region``."""
    for suffix in SUFFIXES:
        if region.endswith(suffix):
            return region[: -len(suffix)]
    return region


def build_city_index(payload: Any) -> list[dict[str, Any]]:
    """Turn the map API's ``[code, name, ...]`` rows into ``{name: code}`` objects."""
    data = payload.get("data") if isinstance(payload, dict) else None
    cities = data.get("city") if isinstance(data, dict) else None
    if not isinstance(cities, list):
        return []
    index = []
    for city in cities:
        if not isinstance(city, list) or len(city) < 2:
            continue
        code, name = city[0], city[1]
        index.append({name: code} if isinstance(name, str) else {})
    return index


def _text(node: Tag | None) -> str:
    return node.get_text().strip() if node is not None else ""


def parse_weather(html: str) -> list[dict[str, Any]]:
    """Extract the per-day forecast blocks from a forecast page."""
    soup = BeautifulSoup(html, "html.parser")
    days = []
    for day in soup.select("div.day"):
        items = day.select("div.day-item")

        def item(position: int) -> str:
            return _text(items[position]) if position < len(items) else ""

        bar = day.select_one("div.bar")
        high = _text(bar.select_one("div.high")) if bar is not None else ""
        low = _text(bar.select_one("div.low")) if bar is not None else ""

        days.append(
            {
                "date": item(0).split(),
                "weather_day": item(2),
                "wind_day": item(3),
                "wind_level_day": item(4),
                "high_temp": high,
                "low_temp": low,
                "weather_night": item(6),
                "wind_level_night": item(8),
            }
        )
    return days


async def weather(state: Any, q: str) -> JsonResponse:
    """Look up the region's station id (cached) and return its forecast."""
    name = remove_suffix(q)

    async def load_index() -> list[dict[str, Any]]:
        return build_city_index(await state.http.get_json(CITY_INDEX_URL))

    cities = await state.redis.get_or_set_json(CITY_CACHE_KEY, None, load_index)
    if cities is None:
        raise InternalError("city index unavailable")

    city_id = next(
        (
            city[name]
            for city in cities
            if isinstance(city, dict) and isinstance(city.get(name), str)
        ),
        None,
    )
    if city_id is None:
        raise NotFound(f"unknown region: {q}")

    response = await state.http.get(CITY_PAGE_URL.format(city_id))
    return success(
        {"title": TITLE, "q": q, "id": city_id, "list": parse_weather(response.text)}
    )