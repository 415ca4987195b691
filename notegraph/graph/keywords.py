from __future__ import annotations
from typing import FrozenSet, List, Optional
import re

# ASCII word characters only; accented letters split tokens
_SPLIT_RE = re.compile(r"\W+", re.ASCII)

MIN_KEYWORD_LENGTH = 4

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "and", "that", "this", "have", "for", "not", "with", "you", "are",
    "from", "they", "will", "your", "what", "about", "which", "when", "there",
    "been", "more", "also", "into", "some", "than", "then", "them", "these",
    "its", "our", "out", "can", "all", "was", "but", "has", "had", "his",
    "her", "she", "him", "were", "said", "each", "how", "their", "would",
})


def ordered_keywords(text: Optional[str]) -> List[str]:
    """Significant tokens of `text`, de-duplicated in first-occurrence order."""
    if not text:
        return []
    seen = set()
    out: List[str] = []
    for tok in _SPLIT_RE.split(text.lower()):
        if len(tok) < MIN_KEYWORD_LENGTH or tok in STOP_WORDS or tok in seen:
            continue
        seen.add(tok)
        out.append(tok)
    return out


def extract_keywords(text: Optional[str]) -> FrozenSet[str]:
    return frozenset(ordered_keywords(text))
