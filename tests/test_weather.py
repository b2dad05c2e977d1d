import json
from types import SimpleNamespace

import httpx
import pytest
import respx

from xuul.cache import DEFAULT_EXPIRATION, RedisCache
from xuul.http_client import HttpClient
from xuul.response import NotFound
from xuul.weather import (
    CITY_CACHE_KEY,
    CITY_INDEX_URL,
    CITY_PAGE_URL,
    build_city_index,
    parse_weather,
    remove_suffix,
    weather,
)


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttl = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.ttl[key] = ex


DAY_VALUES = ["Mon\n   06/01", "icon", "sunny", "north", "level 3", "icon", "cloudy", "south", "breeze"]


def _day_html(values, high="31", low="20"):
    items = "".join(f'<div class="day-item">{value}</div>' for value in values)
    return (
        f'<div class="day">{items}'
        f'<div class="bar"><div class="high"> {high} </div><div class="low">{low}</div></div>'
        "</div>"
    )


def _page(*days):
    return f"<html><body><div id='dayList'>{''.join(days)}</div></body></html>"


def test_remove_suffix_strips_city_marker():
    assert remove_suffix("北京市") == "北京"
    assert remove_suffix("延边朝鲜族自治州") == "延边朝鲜族"


def test_remove_suffix_uses_first_matching_in_order():
    assert remove_suffix("某市辖区") == "某市辖"


def test_remove_suffix_leaves_plain_names():
    assert remove_suffix("海淀") == "海淀"
    assert remove_suffix("") == ""


def test_build_city_index():
    payload = {"data": {"city": [["54511", "北京", 1.0], ["58367", "上海"], ["1"], [7, None]]}}
    assert build_city_index(payload) == [{"北京": "54511"}, {"上海": "58367"}, {}]


def test_build_city_index_without_cities():
    assert build_city_index({}) == []
    assert build_city_index({"data": {"city": "nope"}}) == []


def test_parse_weather_reads_all_fields():
    days = parse_weather(_page(_day_html(DAY_VALUES), _day_html(DAY_VALUES, high="25", low="18")))
    assert len(days) == 2
    first = days[0]
    assert first == {
        "date": ["Mon", "06/01"],
        "weather_day": "sunny",
        "wind_day": "north",
        "wind_level_day": "level 3",
        "high_temp": "31",
        "low_temp": "20",
        "weather_night": "cloudy",
        "wind_level_night": "breeze",
    }
    assert days[1]["high_temp"] == "25"
    assert days[1]["low_temp"] == "18"


def test_parse_weather_missing_parts_default_to_empty():
    days = parse_weather(_page('<div class="day"><div class="day-item">only</div></div>'))
    assert days == [
        {
            "date": ["only"],
            "weather_day": "",
            "wind_day": "",
            "wind_level_day": "",
            "high_temp": "",
            "low_temp": "",
            "weather_night": "",
            "wind_level_night": "",
        }
    ]


def test_parse_weather_without_days():
    assert parse_weather("<html><body><p>nothing</p></body></html>") == []


@pytest.mark.asyncio
async def test_weather_fetches_and_caches_index():
    fake = FakeRedis()
    state = SimpleNamespace(http=HttpClient(httpx.AsyncClient()), redis=RedisCache(fake))
    index_payload = {"data": {"city": [["54511", "北京"], ["58367", "上海"]]}}
    with respx.mock:
        index_route = respx.get(CITY_INDEX_URL).mock(return_value=httpx.Response(200, json=index_payload))
        respx.get(CITY_PAGE_URL.format("54511")).mock(
            return_value=httpx.Response(200, text=_page(_day_html(DAY_VALUES)))
        )
        first = await weather(state, "北京市")
        second = await weather(state, "北京")
        assert index_route.call_count == 1

    assert first.data["title"] == "天气查询"
    assert first.data["q"] == "北京市"
    assert first.data["id"] == "54511"
    assert first.data["list"] == parse_weather(_page(_day_html(DAY_VALUES)))
    assert second.data["id"] == "54511"
    assert json.loads(fake.store[CITY_CACHE_KEY]) == build_city_index(index_payload)
    assert fake.ttl[CITY_CACHE_KEY] == DEFAULT_EXPIRATION


@pytest.mark.asyncio
async def test_weather_unknown_region():
    fake = FakeRedis()
    fake.store[CITY_CACHE_KEY] = json.dumps([{"上海": "58367"}])
    state = SimpleNamespace(http=HttpClient(httpx.AsyncClient()), redis=RedisCache(fake))
    with pytest.raises(NotFound):
        await weather(state, "北京")