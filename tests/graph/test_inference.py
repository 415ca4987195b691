import itertools

import pytest

from notegraph.graph.inference import (
    connection_counts, connection_key, connections_for, filter_connections, infer_connections, infer_pair,
    neighbour_ids,
)
from notegraph.graph.models import Note


def _note(note_id, title="", content="", tags=None):
    return Note(id=note_id, title=title, content=content, tags=tags or [])


@pytest.fixture
def mixed_notes():
    return [
        _note("1", "Intro to AI", "Neural networks and search", ["ai", "ml"]),
        _note("2", "Advanced AI", "Planning agents", ["ai"]),
        _note("3", "MLOps pipelines", "Deploying models", ["mlops"]),
        _note("4", "Quantum computing basics", "superposition qubits"),
        _note("5", "Basics of quantum algorithms", "qubits gates"),
        _note("6", "Gardening", "tomatoes soil"),
    ]


def test_shared_tags_scenario():
    a = _note("1", "Intro to AI", tags=["ai", "ml"])
    b = _note("2", "Advanced AI", tags=["ai"])
    conns = infer_connections([a, b])
    assert len(conns) == 1
    c = conns[0]
    assert c.strength == pytest.approx(0.5)
    assert c.reason == "Shared tags: #ai"
    assert {c.source, c.target} == {"1", "2"}


def test_shared_tags_strength_floor():
    a = _note("a", tags=["x", "y", "z", "w"])
    b = _note("b", tags=["x", "p", "q", "r"])
    # jaccard 1/7 is lifted to the 0.4 floor
    assert infer_pair(a, b).strength == pytest.approx(0.4)


def test_duplicate_tags_count_once():
    a = _note("a", tags=["ai", "ai"])
    b = _note("b", tags=["ai"])
    c = infer_pair(a, b)
    assert c.strength == pytest.approx(1.0)
    assert c.reason == "Shared tags: #ai"


def test_tag_substring_tier():
    a = _note("a", "Alpha", tags=["ml"])
    b = _note("b", "Omega", tags=["mlops"])
    c = infer_pair(a, b)
    assert c.strength == pytest.approx(0.35)
    assert c.reason == "Related tags"


def test_keyword_overlap_scenario():
    a = _note("q1", "Quantum computing basics", "superposition qubits")
    b = _note("q2", "Basics of quantum algorithms", "qubits gates")
    conns = infer_connections([a, b])
    assert len(conns) == 1
    c = conns[0]
    assert "qubits" in c.reason
    assert c.reason == "Related concepts: quantum, basics, qubits"
    # 3 shared out of 7 keywords -> 6 * 3/7 capped at 0.9
    assert c.strength == pytest.approx(0.9)


def test_keyword_overlap_below_threshold_without_title_match():
    filler = " ".join(f"word{i}" for i in range(40))
    a = _note("a", "Alpha", filler)
    b = _note("b", "Omega", "word0 zebra")
    assert infer_connections([a, b]) == []


def test_keyword_overlap_title_match_rescues_low_jaccard():
    filler = " ".join(f"word{i}" for i in range(40))
    a = _note("a", "Alpha", filler)
    b = _note("b", "Word0 notes", "zebra")
    c = infer_pair(a, b)
    assert c is not None
    # shared: word0; union: alpha + 40 words + notes + zebra = 43
    assert c.strength == pytest.approx(6 / 43)
    assert c.reason == "Related concepts: word0"


def test_reason_lists_at_most_three_keywords():
    a = _note("a", "Apples", "pears plums grapes melons")
    b = _note("b", "Fruit", "apples pears plums grapes melons")
    c = infer_pair(a, b)
    assert c.reason == "Related concepts: apples, pears, plums"


def test_no_overlap_emits_nothing():
    a = _note("a", "Gardening", "tomatoes soil")
    b = _note("b", "Rust", "borrow checker")
    assert infer_connections([a, b]) == []


def test_symmetry(mixed_notes):
    forward = infer_connections(mixed_notes)
    backward = infer_connections(list(reversed(mixed_notes)))
    as_map = lambda conns: {c.key: c.model_dump() for c in conns}
    assert as_map(forward) == as_map(backward)


def test_canonical_source_target():
    c = infer_pair(_note("b", tags=["x"]), _note("a", tags=["x"]))
    assert (c.source, c.target) == ("a", "b")
    assert c.key == connection_key("b", "a") == "a~b"


def test_tier_exclusivity():
    # shared tag plus heavy keyword overlap: tier 1 must win
    a = _note("a", "Quantum qubits", "quantum qubits entanglement", ["physics", "quantum"])
    b = _note("b", "Quantum qubits", "quantum qubits entanglement", ["physics"])
    c = infer_pair(a, b)
    assert c.reason.startswith("Shared tags:")
    assert c.strength == pytest.approx(0.5)


def test_strength_bounds(mixed_notes):
    for c in infer_connections(mixed_notes):
        if c.reason.startswith("Related concepts"):
            assert 0 < c.strength <= 0.9
        else:
            assert 0.35 <= c.strength <= 1.0


def test_at_most_one_connection_per_pair(mixed_notes):
    conns = infer_connections(mixed_notes)
    keys = [c.key for c in conns]
    assert len(keys) == len(set(keys))
    assert all(c.source != c.target for c in conns)


def test_idempotence(mixed_notes):
    first = [c.model_dump() for c in infer_connections(mixed_notes)]
    second = [c.model_dump() for c in infer_connections(mixed_notes)]
    assert first == second


def test_delete_leaves_unrelated_connections_identical(mixed_notes):
    before = {c.key: c.model_dump_json() for c in infer_connections(mixed_notes)}
    remaining = [n for n in mixed_notes if n.id != "2"]
    after = {c.key: c.model_dump_json() for c in infer_connections(remaining)}
    assert all("2" not in key.split("~") for key in after)
    expected = {k: v for k, v in before.items() if "2" not in k.split("~")}
    assert after == expected


def test_duplicate_ids_are_evaluated_once():
    a = _note("a", tags=["x"])
    b = _note("b", tags=["x"])
    conns = infer_connections([a, b, a])
    assert [c.key for c in conns] == ["a~b"]


def test_every_pair_checked():
    notes = [_note(str(i), tags=["shared"]) for i in range(5)]
    conns = infer_connections(notes)
    assert {c.key for c in conns} == {connection_key(x.id, y.id) for x, y in itertools.combinations(notes, 2)}


def test_read_helpers(mixed_notes):
    conns = infer_connections(mixed_notes)
    assert neighbour_ids("1", conns) >= {"2"}
    counts = connection_counts(conns)
    assert counts["1"] == len(connections_for("1", conns))
    visible = filter_connections(conns, ["1", "2"])
    assert [c.key for c in visible] == ["1~2"]


def test_ids_containing_separator_do_not_collide():
    # ("a~b", "c") and ("a", "b~c") share the display key "a~b~c"
    notes = [_note(i, tags=["x"]) for i in ("a~b", "c", "a", "b~c")]
    conns = infer_connections(notes)
    assert len(conns) == 6
    assert {(c.source, c.target) for c in conns} == {
        tuple(sorted(pair)) for pair in itertools.combinations([n.id for n in notes], 2)
    }
