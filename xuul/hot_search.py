"""Trending-search lists from several Chinese platforms."""

from __future__ import annotations

import json
import math
from collections.abc import Awaitable, Callable
from typing import Any

from bs4 import BeautifulSoup

from xuul.http_client import HttpClient
from xuul.response import AppError, InternalError, JsonResponse, success

TITLE = "热搜榜单"

DOUYIN_URL = "https://www.douyin.com/aweme/v1/web/hot/search/list"
DOUYIN_REFERER = "https://www.douyin.com/hot"
KUAISHOU_URL = "https://www.kuaishou.com/brilliant"
KUAISHOU_HOST = "www.kuaishou.com"
TOUTIAO_URL = "https://is-lq.snssdk.com/api/suggest_words/?business_id=10016"
BAIDU_URL = "https://top.baidu.com/api/board?platform=pc&tab=realtime"
WEIBO_URL = "https://weibo.com/ajax/side/hotSearch"
BILIBILI_URL = "https://app.bilibili.com/x/v2/search/trending/ranking?limit=50"

KUAISHOU_MARKER = "__APOLLO_STATE__"
KUAISHOU_PREFIX = "window.__APOLLO_STATE__="
KUAISHOU_SUFFIX = ";(function()"
KUAISHOU_RANK_KEY = '$ROOT_QUERY.visionHotRank({"page":"brilliant"})'

UNKNOWN_TITLE = "未知"
PINNED = "置顶"

_U64_MAX = 2**64 - 1


def _lookup(value: Any, *path: str | int) -> Any:
    """Walk into nested JSON, yielding None where a key or index is missing."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(value, list) or not 0 <= key < len(value):
                return None
            value = value[key]
        else:
            if not isinstance(value, dict):
                return None
            value = value.get(key)
    return value


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_u64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= _U64_MAX:
        return value
    return None


def _parse_u64(text: str) -> int | None:
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value <= _U64_MAX else None


def _loose_u64(value: Any) -> int:
    """A non-negative integer or a numeric string, else 0."""
    number = _as_u64(value)
    if number is None and isinstance(value, str):
        number = _parse_u64(value)
    return 0 if number is None else number


def _entry(rank: int, title: str, hot: str) -> str:
    return f"{rank}、{title} (热度:{hot})"


def round_to_str(value: int) -> str:
    """Abbreviate a heat value to tens of thousands (万) or thousands (千)."""
    if value >= 10000:
        return f"{math.floor(value / 10000 + 0.5)} 万"
    if value >= 1000:
        return f"{math.floor(value / 1000 + 0.5)} 千"
    return str(value)


def parse_douyin(payload: Any) -> list[str]:
    word_list = _lookup(payload, "data", "word_list")
    if not isinstance(word_list, list):
        raise InternalError("douyin: word_list missing")
    entries = []
    for rank, item in enumerate(word_list, start=1):
        word = _as_str(_lookup(item, "word"))
        hot = _as_u64(_lookup(item, "hot_value"))
        if word is None or hot is None:
            raise InternalError("douyin: malformed item")
        entries.append(_entry(rank, word, round_to_str(hot)))
    return entries


def parse_kuaishou(html: str) -> list[str]:
    soup = BeautifulSoup(html, "html.parser")
    script_text = next(
        (
            text
            for text in (script.get_text() for script in soup.find_all("script"))
            if KUAISHOU_MARKER in text
        ),
        None,
    )
    if script_text is None:
        raise InternalError("kuaishou: state script not found")

    json_text = ""
    _, found, after = script_text.partition(KUAISHOU_PREFIX)
    if found:
        left, found_end, _ = after.rpartition(KUAISHOU_SUFFIX)
        if found_end:
            json_text = left.strip().rstrip(",")

    try:
        apollo = json.loads(json_text)
    except ValueError as exc:
        raise AppError(f"JSON解析失败: {exc}") from exc

    client = _lookup(apollo, "defaultClient")
    items = _lookup(client, KUAISHOU_RANK_KEY, "items")
    if not isinstance(items, list):
        raise InternalError("kuaishou: rank items missing")

    entries = []
    for rank, item in enumerate(items, start=1):
        item_id = _as_str(_lookup(item, "id"))
        if item_id is None or not isinstance(client, dict) or item_id not in client:
            raise InternalError("kuaishou: rank item not found")
        hot_item = client[item_id]
        name = _as_str(_lookup(hot_item, "name"))
        hot = _as_str(_lookup(hot_item, "hotValue"))
        entries.append(
            _entry(
                rank,
                UNKNOWN_TITLE if name is None else name,
                PINNED if hot is None else hot,
            )
        )
    return entries


def parse_toutiao(payload: Any) -> list[str]:
    words = _lookup(payload, "data", 0, "words")
    if not isinstance(words, list):
        raise InternalError("toutiao: words missing")
    entries = []
    for rank, item in enumerate(words, start=1):
        word = _as_str(_lookup(item, "word"))
        if word is None:
            raise InternalError("toutiao: word missing")
        hot = _as_u64(_lookup(item, "params", "fake_click_cnt"))
        if hot is None:
            raise InternalError("toutiao: click count missing")
        entries.append(_entry(rank, word, round_to_str(hot)))
    return entries


def parse_baidu(payload: Any) -> list[str]:
    content = _lookup(payload, "data", "cards", 0, "content")
    if not isinstance(content, list):
        raise InternalError("baidu: content missing")
    entries = []
    for rank, item in enumerate(content, start=1):
        title = _as_str(_lookup(item, "query"))
        score = _as_str(_lookup(item, "hotScore"))
        hot = _parse_u64(score) if score is not None else None
        entries.append(
            _entry(
                rank,
                UNKNOWN_TITLE if title is None else title,
                round_to_str(0 if hot is None else hot),
            )
        )
    return entries


def _parse_titled(payload: Any, path: tuple[str, ...], title_key: str, hot_key: str) -> list[str]:
    items = _lookup(payload, *path)
    if not isinstance(items, list):
        raise InternalError("hot list missing")
    entries = []
    for rank, item in enumerate(items, start=1):
        title = _as_str(_lookup(item, title_key))
        hot = _loose_u64(_lookup(item, hot_key))
        entries.append(
            _entry(rank, UNKNOWN_TITLE if title is None else title, round_to_str(hot))
        )
    return entries


def parse_weibo(payload: Any) -> list[str]:
    return _parse_titled(payload, ("data", "realtime"), "word", "num")


def parse_bilibili(payload: Any) -> list[str]:
    return _parse_titled(payload, ("data", "list"), "keyword", "hot_id")


async def _douyin(http: HttpClient) -> list[str]:
    return parse_douyin(await http.get_json(DOUYIN_URL, headers={"referer": DOUYIN_REFERER}))


async def _kuaishou(http: HttpClient) -> list[str]:
    response = await http.get(KUAISHOU_URL, headers={"host": KUAISHOU_HOST})
    return parse_kuaishou(response.text)


async def _toutiao(http: HttpClient) -> list[str]:
    return parse_toutiao(await http.get_json(TOUTIAO_URL))


async def _baidu(http: HttpClient) -> list[str]:
    return parse_baidu(await http.get_json(BAIDU_URL))


async def _weibo(http: HttpClient) -> list[str]:
    return parse_weibo(await http.get_json(WEIBO_URL))


async def _bilibili(http: HttpClient) -> list[str]:
    return parse_bilibili(await http.get_json(BILIBILI_URL))


_SOURCES: dict[str, Callable[[HttpClient], Awaitable[list[str]]]] = {
    "抖音": _douyin,
    "douyin": _douyin,
    "快手": _kuaishou,
    "kuaishou": _kuaishou,
    "头条": _toutiao,
    "toutiao": _toutiao,
    "百度": _baidu,
    "baidu": _baidu,
    "微博": _weibo,
    "weibo": _weibo,
    "b站": _bilibili,
    "哔哩哔哩": _bilibili,
    "bilibili": _bilibili,
}


async def hot_search(state: Any, q: str) -> JsonResponse:
    """Fetch the trending list of the platform named by ``q`` (case-insensitive)."""
    name = q.lower()
    fetch = _SOURCES.get(name)
    if fetch is None:
        raise InternalError(f"unknown hot search source: {q}")
    entries = await fetch(state.http)
    return success({"title": TITLE, "name": name, "list": entries})