"""Request handlers for the small public API endpoints."""

from __future__ import annotations

import asyncio
import datetime
import json
import random
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from bs4 import BeautifulSoup
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from xuul.models import DataCosImage, DataCosVideo
from xuul.response import (
    AppError,
    InternalError,
    JsonResponse,
    NotFound,
    UpstreamError,
    error,
    success,
)

BING_URL = "http://cn.bing.com/HPImageArchive.aspx?format=js&idx=0&n=1"
BING_HOST = "http://cn.bing.com"

CHANGYA_URL = "https://m.api.singduck.cn/user-piece/6oGNUeM16kBuRmPct?userId=2003919010"

COS_IMAGE_KEY = "cos_image"
COS_VIDEO_KEY = "cos_video"
COS_IMAGE_PREFIX = "https://cdn.cdnjson.com/pic.html?url="
BAD_PARAMS_DETAIL = "请检查参数是否正确!"

EVERYDAY_URLS = (
    "https://60s-static.viki.moe/60s/{}.json",
    "https://cdn.jsdelivr.net/gh/vikiboss/60s-static-host/static/60s/{}.json",
    "https://raw.githubusercontent.com/vikiboss/60s-static-host/main/static/60s/{}.json",
)

FANYI_URL = (
    "https://wxapp.translator.qq.com/api/translate?sourceText={}&source=auto&target=auto"
    "&platform=MQQAPP&candidateLangs=zh%7Cen&guid=wxapp_openid_1576171882_ptxba365xp"
)

IP_URL = (
    "http://opendata.baidu.com/api.php?query={}&co=&resource_id=6006"
    "&t=1433920989928&ie=utf8&oe=utf-8&format=json"
)

MISHE_TOP_URL = "https://bbs-api.miyoushe.com/post/wapi/getImagePostTopN"
MISHE_NEW_URL = "https://bbs-api.miyoushe.com/post/wapi/getForumPostList"
MISHE_POSTS_URL = (
    "https://bbs-api.mihoyo.com/post/api/feeds/posts?fresh_action=1&gids=2&last_id="
)
MISHE_TOP_PARAMS = {"forum_id": "49", "gids": "1"}
MISHE_NEW_PARAMS = {
    "forum_id": "49",
    "gids": "2",
    "is_good": "false",
    "is_hot": "false",
    "page_size": "20",
    "sort_type": "2",
}
MISHE_POSTS_PARAMS = {"fresh_action": "1", "gids": "2", "last_id": ""}

QRCODE_URL = (
    "https://qrcode.hlcode.cn/beautify/style/create?bgColor={bgcolor}&"
    "bodyType=1&content={content}&down=0&embedPosition=0&embedText=&"
    "embedTextColor=%23000000&embedTextSize=38&eyeInColor=%23000000&"
    "eyeOutColor=%23000000&eyeType=8&eyeUseFore=1&fontFamily=0&"
    "foreColor={color}&foreColorImage=&foreColorTwo=&foreType=0&frameColor=&"
    "gradientWay=0&level=H&logoShadow=0&logoShap=2&logoUrl=&margin=2&rotate=30"
    "&size={size}&format=1&qrCodeId=0"
)
QRCODE_MEDIA_TYPE = "image/jpeg"
QRCODE_DEFAULT_BGCOLOR = "F4F4F4"
QRCODE_DEFAULT_COLOR = "FF6B6B"
QRCODE_DEFAULT_SIZE = "400"

YS_KACI_URL = "https://api-takumi.mihoyo.com/common/blackboard/ys_obc/v1/gacha_pool?app_sn=ys_obc"


def _index(value: Any, *path: str | int) -> Any:
    """Walk into nested JSON; a missing key or index yields None."""
    for key in path:
        if isinstance(key, int):
            if not isinstance(value, list) or not 0 <= key < len(value):
                return None
            value = value[key]
        elif isinstance(value, dict):
            value = value.get(key)
        else:
            return None
    return value


def _str_or_empty(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _header(headers: Mapping[str, str], name: str) -> str | None:
    wanted = name.lower()
    return next((value for key, value in headers.items() if key.lower() == wanted), None)


async def bing(state: Any) -> JsonResponse:
    """Today's Bing wallpaper."""
    payload = await state.http.get_json(BING_URL)
    path = _index(payload, "images", 0, "url")
    if not isinstance(path, str):
        raise InternalError("bing: image url missing")
    return success({"title": "必应美图", "url": BING_HOST + path})


def parse_changya(html: str) -> dict[str, Any]:
    """Extract the first song piece from the page's embedded data script."""
    soup = BeautifulSoup(html, "html.parser")
    script = soup.select_one("#__NEXT_DATA__")
    if script is None:
        raise AppError("未找到脚本标签")
    try:
        data = json.loads(script.get_text())
    except ValueError as exc:
        raise AppError("JSON解析失败") from exc

    pieces = _index(data, "props", "pageProps", "pieces")
    if not isinstance(pieces, list):
        raise AppError("无效的pieces格式")
    if not pieces:
        raise AppError("空数据列表")
    piece = pieces[0]

    try:
        audio_url = unquote(_str_or_empty(_index(piece, "audioUrl")), errors="strict")
    except UnicodeDecodeError as exc:
        raise InternalError("changya: audio url is not valid UTF-8") from exc

    return {
        "title": "随机唱鸭",
        "artist": _str_or_empty(_index(piece, "artist")),
        "avatarUrl": _str_or_empty(_index(piece, "avatarUrl")),
        "lyric": _str_or_empty(_index(piece, "lyric")),
        "audioUrl": audio_url,
    }


async def changya(state: Any) -> JsonResponse:
    """A song piece from the singing app's user page."""
    response = await state.http.get(CHANGYA_URL)
    return success(parse_changya(response.text))


async def _random_row(state: Any, model: type, cache_key: str) -> Any:
    async def load_max_id() -> int | None:
        try:
            return await asyncio.to_thread(state.db.get_max_id, model)
        except SQLAlchemyError as exc:
            raise UpstreamError(str(exc)) from exc

    try:
        max_id = await state.redis.get_or_set_json(cache_key, None, load_max_id)
    except RedisError as exc:
        raise AppError(str(exc)) from exc
    if max_id is None:
        raise NotFound(f"{cache_key}: table is empty")
    if not isinstance(max_id, int) or isinstance(max_id, bool) or max_id < 1:
        raise InternalError(f"{cache_key}: invalid max id {max_id!r}")

    row_id = random.randint(1, max_id)
    try:
        row = await asyncio.to_thread(state.db.find_by_id, model, row_id)
    except SQLAlchemyError as exc:
        raise UpstreamError(str(exc)) from exc
    if row is None:
        raise NotFound(f"{cache_key}: no row {row_id}")
    return row


async def cos(
    state: Any, cos_image: bool | None = None, cos_video: bool | None = None
) -> JsonResponse:
    """A random cosplay image or video, chosen by which flag alone is true."""
    if cos_image is True and cos_video is not True:
        row = await _random_row(state, DataCosImage, COS_IMAGE_KEY)
        url = COS_IMAGE_PREFIX + row.url
    elif cos_video is True and cos_image is not True:
        row = await _random_row(state, DataCosVideo, COS_VIDEO_KEY)
        url = row.url
    else:
        return error(400, BAD_PARAMS_DETAIL)
    return success({"title": "逆天cos", "url": url})


async def everyday_60s(state: Any, today: str | None = None) -> JsonResponse:
    """The daily news digest, trying each mirror in turn."""
    day = today if today is not None else datetime.date.today().strftime("%Y-%m-%d")
    for template in EVERYDAY_URLS:
        try:
            payload = await state.http.get_json(template.format(day))
        except AppError:
            continue
        return success(
            {
                "title": "60s看世界",
                "list": _index(payload, "news"),
                "image": _index(payload, "image"),
                "tip": _index(payload, "tip"),
                "date": _index(payload, "date"),
            }
        )
    raise NotFound(f"no digest for {day}")


async def fanyi(state: Any, text: str) -> JsonResponse:
    """Translate ``text`` with automatic language detection."""
    payload = await state.http.get_json(FANYI_URL.format(text))
    return success(
        {
            "title": "简心翻译",
            "sourceText": _index(payload, "sourceText"),
            "targetText": _index(payload, "targetText"),
        }
    )


async def ip(state: Any, ip: str | None, headers: Mapping[str, str]) -> JsonResponse:
    """Locate ``ip``, or the client's forwarded address when none is given."""
    address = ip if ip is not None else _header(headers, "X-Forwarded-For")
    if address is None:
        raise InternalError("no ip given and no X-Forwarded-For header")
    user_agent = _header(headers, "User-Agent")

    payload = await state.http.get_json(IP_URL.format(address))
    return success(
        {
            "title": "IP查询",
            "ip": address,
            "location": _index(payload, "data", 0, "location"),
            "user_agent": user_agent,
        }
    )


def parse_mishe_posts(payload: Any) -> list[dict[str, Any]]:
    """Turn a forum post list into title, author and image URLs."""
    items = _index(payload, "data", "list")
    if not isinstance(items, list):
        return []
    posts = []
    for item in items:
        images = _index(item, "image_list")
        urls = (
            [image["url"] for image in images if isinstance(image, dict) and "url" in image]
            if isinstance(images, list)
            else []
        )
        posts.append(
            {
                "title": _index(item, "post", "subject"),
                "coser": _index(item, "user", "nickname"),
                "images": urls,
            }
        )
    return posts


async def mishe_cos(
    state: Any,
    top: bool | None = None,
    new: bool | None = None,
    posts: bool | None = None,
) -> JsonResponse:
    """Cosplay posts from the forum: top, newest or the feed, checked in that order."""
    if top is True:
        url, params = MISHE_TOP_URL, MISHE_TOP_PARAMS
    elif new is True:
        url, params = MISHE_NEW_URL, MISHE_NEW_PARAMS
    elif posts is True:
        url, params = MISHE_POSTS_URL, MISHE_POSTS_PARAMS
    else:
        return error(400, BAD_PARAMS_DETAIL)

    payload = await state.http.get_json(url, params=params)
    return success({"title": "米社cos", "list": parse_mishe_posts(payload)})


async def qrcode(
    state: Any,
    q: str,
    color: str | None = None,
    bgcolor: str | None = None,
    size: str | None = None,
) -> bytes:
    """Render ``q`` as a styled QR code and return the JPEG bytes."""
    url = QRCODE_URL.format(
        bgcolor=bgcolor if bgcolor is not None else QRCODE_DEFAULT_BGCOLOR,
        content=q,
        color=color if color is not None else QRCODE_DEFAULT_COLOR,
        size=size if size is not None else QRCODE_DEFAULT_SIZE,
    )
    payload = await state.http.get_json(url)
    image_url = _index(payload, "data")
    if not isinstance(image_url, str):
        raise InternalError("qrcode: image url missing")
    response = await state.http.get(image_url)
    return response.content


def yiyan() -> JsonResponse:
    """The quote endpoint, currently under maintenance."""
    return error(400, {"title": "一言", "error": "正在维护中..."})


def parse_gacha_pools(payload: Any) -> dict[str, Any]:
    """Summarise the current wish banners and the first banner's time window."""
    pools = _index(payload, "data", "list")
    if not isinstance(pools, list):
        raise InternalError("ys_kaci: pool list missing")
    return {
        "title": "原神卡池",
        "list": [
            {
                "id": _index(pool, "id"),
                "title": _index(pool, "title"),
                "content": _index(pool, "content_before_act"),
                "icon": _index(pool, "pool", 0, "icon"),
            }
            for pool in pools
        ],
        "start_time": _index(pools, 0, "start_time"),
        "end_time": _index(pools, 0, "end_time"),
    }


async def ys_kaci(state: Any) -> JsonResponse:
    """The current wish banners."""
    return success(parse_gacha_pools(await state.http.get_json(YS_KACI_URL)))