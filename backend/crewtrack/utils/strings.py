from __future__ import annotations

import re
import unicodedata
from typing import Any, Tuple

_WORD_START = re.compile(r"\b\w")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def base_key(value: Any) -> str:
    """
    Collation key that ignores case and accents ("a" == "A" == "á").
    """
    decomposed = unicodedata.normalize("NFKD", as_text(value))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def locale_key(value: Any) -> Tuple[str, str, str]:
    """
    Full collation key: base letters first, then accents, then case.

    Lowercase sorts before uppercase when the base letters and accents match.
    """
    text = as_text(value)
    return (
        base_key(text),
        unicodedata.normalize("NFKD", text).casefold(),
        text.swapcase(),
    )


def pretty_title(value: Any) -> str:
    """
    'STAGE_MANAGEMENT' -> 'Stage Management'.
    """
    raw = as_text(value).strip()
    if not raw:
        return ""
    spaced = raw.replace("_", " ").lower()
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)
