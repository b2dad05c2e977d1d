"""Status, title, icon and meta tags of a web page."""

from __future__ import annotations

import time
from typing import Any

from bs4 import BeautifulSoup

from xuul.response import JsonResponse, success

TITLE = "网站信息查询"


def _meta_content(soup: BeautifulSoup, name: str) -> str | None:
    element = soup.select_one(f"meta[name='{name}']")
    return element.get("content") if element is not None else None


def extract_page_info(html: str, url: str) -> dict[str, Any]:
    """Pull the title, icon link, description and keywords out of ``html``.

    A relative icon link is prefixed with the part of ``url`` before its first slash.
    """
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)

    title_element = soup.find("title")
    title = " ".join(title_element.strings).strip() if title_element is not None else None

    href = next(
        (
            link.get("href")
            for link in soup.select("link[rel]")
            if "icon" in link.get("rel", "") and link.get("href") is not None
        ),
        None,
    )
    if href is not None and not href.startswith("http"):
        href = url.split("/")[0] + href

    return {
        "website_title": title,
        "website_icon": href,
        "website_description": _meta_content(soup, "description"),
        "website_keywords": _meta_content(soup, "keywords"),
    }


async def website_info(state: Any, url: str) -> JsonResponse:
    """Fetch ``url``, timing the request, and describe the page."""
    start = time.perf_counter()
    response = await state.http.get(url)
    elapsed_ms = int((time.perf_counter() - start) * 1000)

    code = response.status_code
    if not response.is_success:
        return success({"title": TITLE, "website_code": code})

    info = extract_page_info(response.text, url)
    return success(
        {
            "title": TITLE,
            "website_code": code,
            **info,
            "process_time": f"{elapsed_ms}ms",
        }
    )