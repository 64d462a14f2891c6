from __future__ import annotations

import re

_WS = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Collapse whitespace, capitalise the first letter, end with a full stop."""
    t = _WS.sub(" ", text or "").strip()
    if not t:
        return t
    t = t[0].upper() + t[1:]
    if t[-1] not in ".!?":
        t += "."
    return t


def make_title(text: str, *, max_words: int = 5) -> str:
    first = re.split(r"[.!?\n]", (text or "").strip(), maxsplit=1)[0]
    words = first.split()[:max_words]
    return " ".join(words).upper() or "COMPLAINT"
