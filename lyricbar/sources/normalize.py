from __future__ import annotations

import regex

# Anything that is not a Unicode letter or a decimal digit.
_NON_ALNUM_RE = regex.compile(r"[^\p{L}\p{Nd}]+")


def normalize(s: str) -> str:
    """Lowercase `s` and keep only its letters and decimal digits, in order."""
    return _NON_ALNUM_RE.sub("", s.lower())
