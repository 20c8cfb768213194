"""Text normalization for comparing and keying track metadata.

Upstream metadata providers annotate titles inconsistently ("(Remastered
2011)", "[Explicit]", "feat. X", "Deluxe Edition"). Everything here is
pure and deterministic: the same input always yields the same output,
which is what makes normalized text usable inside cache keys.
"""

import re

_PARENTHETICAL = re.compile(r"\([^)]*\)")
_BRACKETED = re.compile(r"\[[^\]]*\]")
_DASHES = re.compile(r"[-–—]")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_FEATURING = re.compile(r"\b(?:feat|ft)\b")
_WHITESPACE = re.compile(r"\s+")

_ALBUM_NOISE = re.compile(
    r"\b(?:deluxe|edition|remaster(?:ed)?|expanded|bonus|anniversary"
    r"|live|acoustic|mono|stereo|version)\b"
)


def _collapse(value: str) -> str:
    return _WHITESPACE.sub(" ", value).strip()


def normalize_text(value: str | None) -> str:
    """Canonical form of a free-text field.

    Lower-cases, drops parenthetical and bracketed segments, expands
    ``&`` to "and", strips "feat."/"ft." markers, turns dashes into
    spaces, removes any other non-alphanumeric character and collapses
    whitespace. Idempotent.

    Args:
        value: Raw text, may be None or empty.

    Returns:
        Normalized text ("" for absent input).
    """
    if not value:
        return ""
    text = value.lower()
    text = _PARENTHETICAL.sub(" ", text)
    text = _BRACKETED.sub(" ", text)
    text = text.replace("&", " and ")
    text = _DASHES.sub(" ", text)
    text = _NON_ALNUM.sub(" ", text)
    # Punctuation is already gone here, so "feat." is the bare word "feat"
    text = _FEATURING.sub(" ", text)
    return _collapse(text)


def normalize_album(value: str | None) -> str:
    """Normalize an album title and drop edition/release descriptors.

    "Abbey Road (Remastered)" and "Abbey Road - Deluxe Edition" both
    become "abbey road".
    """
    return _collapse(_ALBUM_NOISE.sub("", normalize_text(value)))
