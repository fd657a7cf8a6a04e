from __future__ import annotations

import codecs
import re

_HEAD_OPEN = re.compile(r"<head(?:\s[^>]*)?>", re.IGNORECASE)
_CHARSET = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)

DEFAULT_CHARSET = "utf-8"


def inject_head_script(html: str, script: str) -> str:
    """
    Inserts script directly after the opening <head> tag, ahead of anything
    else in the head (in particular the tag manager snippet).

    Documents without a head element get the script prepended.
    """
    match = _HEAD_OPEN.search(html)
    if match is None:
        return script + html
    return f"{html[: match.end()]}{script}{html[match.end():]}"


def charset_from_content_type(content_type: str | None) -> str:
    """Charset named in a Content-Type header, utf-8 when absent or unknown."""
    match = _CHARSET.search(content_type or "")
    if match is None:
        return DEFAULT_CHARSET
    try:
        return codecs.lookup(match.group(1)).name
    except LookupError:
        return DEFAULT_CHARSET


def inject_head_script_bytes(document: bytes, script: str, charset: str) -> bytes:
    """
    Byte level variant of inject_head_script for documents in any charset.

    Bytes that do not decode survive untouched via surrogateescape. The script
    itself is ASCII, so it encodes in every ASCII compatible charset.
    """
    html = document.decode(charset, errors="surrogateescape")
    return inject_head_script(html, script).encode(charset, errors="surrogateescape")
