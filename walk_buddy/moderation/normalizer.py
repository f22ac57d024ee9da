"""
Obfuscation-resistant text normalization.

normalize() maps arbitrary user text onto a canonical form made only of
lowercase letters, digits and single spaces, so that a detection engine can
match "M 4 5 k e d", "m@$ked" and "ma-a-asked" the same way it matches
"masked". The result is for matching only and is never shown to users.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

LEET_MAP = str.maketrans(
    {
        "0": "o",
        "1": "i",
        "3": "e",
        "4": "a",
        "5": "s",
        "7": "t",
        "@": "a",
        "$": "s",
    }
)

ZERO_WIDTH_CHARACTERS = "\u200b\u200c\u200d\u2060\ufeff"
_ZERO_WIDTH = str.maketrans("", "", ZERO_WIDTH_CHARACTERS)

# A run of separators wedged between two alphanumerics: "f_u-u...ck".
_INNER_SEPARATORS = re.compile(r"(?<=[^\W_])(?:[^\w\s]|_)+(?=[^\W_])")
_NON_ALNUM = re.compile(r"[^\w\s]|_")
_REPEATED = re.compile(r"([^\W_])\1+")
_WHITESPACE = re.compile(r"\s+")

MIN_REJOIN_RUN = 3


def _fold_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _rejoin_single_characters(text: str) -> str:
    tokens = text.split()
    out: list[str] = []
    run: list[str] = []

    def flush():
        if len(run) >= MIN_REJOIN_RUN:
            # joining can bring equal letters together again: "f u u c k"
            out.append(_REPEATED.sub(r"\1", "".join(run)))
        else:
            out.extend(run)
        run.clear()

    for token in tokens:
        if len(token) == 1:
            run.append(token)
            continue
        flush()
        out.append(token)
    flush()

    return " ".join(out)


def normalize(text) -> str:
    if not isinstance(text, str):
        return ""

    normalized = unicodedata.normalize("NFKC", text).lower()
    normalized = _fold_diacritics(normalized)
    normalized = normalized.translate(LEET_MAP)
    normalized = normalized.translate(_ZERO_WIDTH)
    normalized = _INNER_SEPARATORS.sub("", normalized)
    normalized = _NON_ALNUM.sub(" ", normalized)
    normalized = _REPEATED.sub(r"\1", normalized)
    normalized = _collapse_whitespace(normalized)
    normalized = _rejoin_single_characters(normalized)
    return _collapse_whitespace(normalized)


def parse_terms(value) -> list[str]:
    """Split a comma-separated string (or a sequence of strings) into trimmed, non-empty terms."""
    if not value:
        return []

    if isinstance(value, str):
        candidates: Iterable = value.split(",")
    else:
        candidates = value

    return [term.strip() for term in candidates if isinstance(term, str) and term.strip()]
