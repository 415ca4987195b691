"""
Connection inference between notes.

Every unordered pair of notes is checked against three tiers in priority
order; the first tier that matches decides the connection and the rest are
skipped:

1. shared tags        -> Jaccard ratio over tags, floored at 0.4
2. tag substring      -> fixed 0.35
3. keyword overlap    -> Jaccard >= 0.03 or a shared title keyword,
                         strength = min(jaccard * 6, 0.9)

The whole set is rebuilt from the current snapshot on every mutation.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .keywords import extract_keywords, ordered_keywords
from .models import Connection, Note

TAG_STRENGTH_FLOOR = 0.4
RELATED_TAG_STRENGTH = 0.35
KEYWORD_JACCARD_THRESHOLD = 0.03
KEYWORD_AMPLIFICATION = 6.0
KEYWORD_STRENGTH_CAP = 0.9
REASON_KEYWORD_LIMIT = 3


def connection_key(a_id: str, b_id: str) -> str:
    """Display key of an unordered pair. Ids may contain "~", so this is not unique."""
    return "~".join(sorted((a_id, b_id)))


def _pair(a_id: str, b_id: str) -> Tuple[str, str]:
    return (a_id, b_id) if a_id <= b_id else (b_id, a_id)


def _shared_tags(a: Note, b: Note) -> Optional[Connection]:
    b_tags = set(b.tags)
    shared = list(dict.fromkeys(t for t in a.tags if t in b_tags))
    if not shared:
        return None
    union = len(set(a.tags) | b_tags)
    return Connection(
        source=a.id,
        target=b.id,
        strength=max(len(shared) / union, TAG_STRENGTH_FLOOR),
        reason="Shared tags: " + ", ".join("#" + t for t in shared),
    )


def _related_tags(a: Note, b: Note) -> Optional[Connection]:
    for at in a.tags:
        if any(at in bt or bt in at for bt in b.tags):
            return Connection(source=a.id, target=b.id, strength=RELATED_TAG_STRENGTH, reason="Related tags")
    return None


def _keyword_overlap(a: Note, b: Note) -> Optional[Connection]:
    a_words = ordered_keywords(a.title + " " + a.content)
    b_words = extract_keywords(b.title + " " + b.content)
    shared = [w for w in a_words if w in b_words]
    if not shared:
        return None

    union = len(set(a_words) | b_words) or 1
    jaccard = len(shared) / union
    a_title = extract_keywords(a.title)
    b_title = extract_keywords(b.title)
    title_match = any(w in a_title or w in b_title for w in shared)
    if jaccard < KEYWORD_JACCARD_THRESHOLD and not title_match:
        return None

    return Connection(
        source=a.id,
        target=b.id,
        strength=min(jaccard * KEYWORD_AMPLIFICATION, KEYWORD_STRENGTH_CAP),
        reason="Related concepts: " + ", ".join(shared[:REASON_KEYWORD_LIMIT]),
    )


_TIERS = (_shared_tags, _related_tags, _keyword_overlap)


def infer_pair(a: Note, b: Note) -> Optional[Connection]:
    """Connection between two distinct notes, or None.

    The pair is put in canonical id order first so the result (including
    source/target and the order of items in the reason) is independent of
    argument order.
    """
    if a.id == b.id:
        return None
    if b.id < a.id:
        a, b = b, a
    for tier in _TIERS:
        conn = tier(a, b)
        if conn is not None:
            return conn
    return None


def infer_connections(notes: Sequence[Note]) -> List[Connection]:
    snapshot = tuple(notes)
    decided: Dict[Tuple[str, str], Optional[Connection]] = {}
    for i in range(len(snapshot)):
        for j in range(i + 1, len(snapshot)):
            a, b = snapshot[i], snapshot[j]
            pair = _pair(a.id, b.id)
            if pair in decided:
                continue
            decided[pair] = infer_pair(a, b)
    return [c for c in decided.values() if c is not None]


# --- Read helpers over a computed connection list ---------------------------

def connections_for(note_id: str, connections: Iterable[Connection]) -> List[Connection]:
    return [c for c in connections if c.source == note_id or c.target == note_id]


def neighbour_ids(note_id: str, connections: Iterable[Connection]) -> Set[str]:
    out: Set[str] = set()
    for c in connections_for(note_id, connections):
        out.add(c.target if c.source == note_id else c.source)
    return out


def connection_counts(connections: Iterable[Connection]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for c in connections:
        counts[c.source] = counts.get(c.source, 0) + 1
        counts[c.target] = counts.get(c.target, 0) + 1
    return counts


def filter_connections(connections: Iterable[Connection], visible_ids: Iterable[str]) -> List[Connection]:
    """Keep only connections whose both endpoints are visible."""
    visible = set(visible_ids)
    return [c for c in connections if c.source in visible and c.target in visible]
