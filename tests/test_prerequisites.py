"""
Tests for the prerequisite expression model.

Covers JSON decoding/encoding, rejection of malformed expressions,
satisfaction checks (including empty AND/OR), and the tree helpers.
"""

import pytest

from coursegraph.errors import CatalogDecodeError, MalformedPrerequisiteError
from coursegraph.prerequisites import (
    MAX_PREREQUISITE_DEPTH,
    RequiresAll,
    RequiresAny,
    RequiresCourse,
    is_satisfied,
    iter_references,
    map_courses,
    prerequisite_depth,
    prerequisite_from_dict,
    prerequisite_to_dict,
    prerequisite_to_english,
    referenced_courses,
)


OS_PREREQ = RequiresAll([
    RequiresCourse("CS101"),
    RequiresAny([RequiresCourse("CS201"), RequiresCourse("CS202")]),
])


# ============================================================================
# Decoding and encoding
# ============================================================================

@pytest.mark.parametrize("expr", [
    RequiresCourse("CS101"),
    RequiresAny([]),
    RequiresAll([]),
    RequiresAny([RequiresCourse("CS101")]),
    RequiresAll([RequiresCourse("CS101")]),
    OS_PREREQ,
    RequiresAny([OS_PREREQ, RequiresAll([RequiresAny([]), RequiresCourse("X")])]),
])
def test_encoded_expression_decodes_to_equal_tree(expr):
    assert prerequisite_from_dict(prerequisite_to_dict(expr)) == expr


def test_decode_nested_expression():
    data = {"and": [{"course number": "CS101"},
                    {"or": [{"course number": "CS201"}, {"course number": "CS202"}]}]}
    assert prerequisite_from_dict(data) == OS_PREREQ


def test_encode_uses_json_tags():
    assert prerequisite_to_dict(OS_PREREQ) == {
        "and": [{"course number": "CS101"},
                {"or": [{"course number": "CS201"}, {"course number": "CS202"}]}]
    }


def test_same_kind_combinators_are_not_flattened():
    data = {"or": [{"or": [{"course number": "A"}]}, {"course number": "A"}]}
    expr = prerequisite_from_dict(data)
    assert expr == RequiresAny([RequiresAny([RequiresCourse("A")]), RequiresCourse("A")])


@pytest.mark.parametrize("data", [
    {"xor": []},
    {"or": {"course number": "A"}},
    {"and": "A"},
    {"course number": 101},
    {"course number": "A", "or": []},
    {},
    ["A"],
    "A",
    None,
])
def test_malformed_expression_rejected(data):
    with pytest.raises(MalformedPrerequisiteError):
        prerequisite_from_dict(data)


def test_malformed_error_names_location_and_is_decode_error():
    data = {"and": [{"course number": "A"}, {"or": [{"xor": []}]}]}
    with pytest.raises(CatalogDecodeError) as excinfo:
        prerequisite_from_dict(data)
    assert excinfo.value.location == "prerequisite.and[1].or[0]"
    assert "xor" in str(excinfo.value)


def test_children_stored_as_tuples():
    expr = RequiresAny([RequiresCourse("A")])
    assert isinstance(expr.options, tuple)
    assert hash(expr) == hash(RequiresAny((RequiresCourse("A"),)))


def _nested_and(levels):
    data = {"course number": "CS101"}
    for _ in range(levels - 1):
        data = {"and": [data]}
    return data


def test_decode_accepts_maximum_depth():
    data = _nested_and(MAX_PREREQUISITE_DEPTH)
    expr = prerequisite_from_dict(data)
    assert prerequisite_depth(expr) == MAX_PREREQUISITE_DEPTH
    assert prerequisite_to_dict(expr) == data


def test_decode_rejects_nesting_past_limit():
    with pytest.raises(MalformedPrerequisiteError) as excinfo:
        prerequisite_from_dict(_nested_and(MAX_PREREQUISITE_DEPTH + 1))
    assert "nested too deeply" in str(excinfo.value)


def test_encode_rejects_very_deep_tree():
    expr = RequiresCourse("CS101")
    for _ in range(3000):
        expr = RequiresAll([expr])
    with pytest.raises(MalformedPrerequisiteError):
        prerequisite_to_dict(expr)


# ============================================================================
# Satisfaction
# ============================================================================

def test_empty_and_is_satisfied():
    assert is_satisfied(RequiresAll([]), set()) is True


def test_empty_or_is_not_satisfied():
    assert is_satisfied(RequiresAny([]), {"CS101"}) is False


@pytest.mark.parametrize("completed, expected", [
    (set(), False),
    ({"CS101"}, False),
    ({"CS201"}, False),
    ({"CS101", "CS202"}, True),
    ({"CS101", "CS201", "CS202"}, True),
])
def test_nested_satisfaction(completed, expected):
    assert is_satisfied(OS_PREREQ, completed) is expected


# ============================================================================
# Tree helpers
# ============================================================================

def test_referenced_courses():
    assert referenced_courses(OS_PREREQ) == {"CS101", "CS201", "CS202"}
    assert referenced_courses(RequiresAll([])) == set()


def test_iter_references_reports_enclosing_logic():
    assert list(iter_references(OS_PREREQ)) == [
        ("CS101", "and"), ("CS201", "or"), ("CS202", "or"),
    ]
    assert list(iter_references(RequiresCourse("CS101"))) == [("CS101", "single")]


def test_map_courses_keeps_structure():
    mapped = map_courses(OS_PREREQ, str.lower)
    assert mapped == RequiresAll([
        RequiresCourse("cs101"),
        RequiresAny([RequiresCourse("cs201"), RequiresCourse("cs202")]),
    ])


@pytest.mark.parametrize("expr, text", [
    (RequiresCourse("CS101"), "CS101"),
    (OS_PREREQ, "CS101 and (CS201 or CS202)"),
    (RequiresAny([RequiresCourse("A")]), "A"),
    (RequiresAll([]), "none"),
    (RequiresAny([]), "nothing (unsatisfiable)"),
])
def test_prerequisite_to_english(expr, text):
    assert prerequisite_to_english(expr) == text
