"""Shareable word paths (/w/<word>)."""

from __future__ import annotations

from urllib.parse import quote, unquote

WORD_PATH_PREFIX = "/w/"

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


def word_to_path(word: str) -> str:
    """Encode a word as a shareable path; spaces become '+'."""
    encoded = quote(word, safe=_URI_COMPONENT_SAFE)
    return WORD_PATH_PREFIX + encoded.replace("%20", "+")


def word_from_path(path: str) -> str:
    """Decode a word from a path produced by `word_to_path` (or typed by hand).

    Both '+' and '%2B' decode to a space, matching how word paths are
    shared.
    """
    segment = path[len(WORD_PATH_PREFIX):] if path.startswith(WORD_PATH_PREFIX) else path
    segment = segment.replace("%2B", " ").replace("%2b", " ").replace("+", " ")
    return unquote(segment)
