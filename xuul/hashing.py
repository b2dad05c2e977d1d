"""Hex digests of a query value with the algorithm the caller picks."""

from __future__ import annotations

import hashlib

from xuul.response import JsonResponse, error, success

TITLE = "哈希加密"
NO_METHOD_DETAIL = "请选择加密方式"


def encryption(
    md5: str | None = None,
    sha256: str | None = None,
    sha384: str | None = None,
    sha512: str | None = None,
) -> JsonResponse:
    """Hash the first given input, trying md5, sha256, sha384 and sha512 in that order."""
    choices = (("md5", md5), ("sha256", sha256), ("sha384", sha384), ("sha512", sha512))
    chosen = next(((name, text) for name, text in choices if text is not None), None)
    if chosen is None:
        return error(400, NO_METHOD_DETAIL)

    name, text = chosen
    digest = hashlib.new(name, text.encode("utf-8")).hexdigest()
    return success({"title": TITLE, "ciphertext": digest})