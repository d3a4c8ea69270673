"""
Prerequisite Expression Model

A prerequisite is a small boolean expression tree over course references:
- RequiresCourse: a single course, by reference (usually a course number)
- RequiresAny:    satisfied when any child is satisfied (OR)
- RequiresAll:    satisfied when every child is satisfied (AND)

The tree is generic over the reference type so that course numbers can later
be resolved into richer references with map_courses(). Expressions are frozen
dataclasses, so two trees built from the same input compare equal and hash
alike.

The JSON form is an externally tagged union with exactly one key per object:
    {"course number": "CSCI3411"}
    {"or":  [<expr>, ...]}
    {"and": [<expr>, ...]}
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterable, Set, Tuple, TypeVar, Union

from coursegraph.errors import MalformedPrerequisiteError

C = TypeVar("C")
D = TypeVar("D")

# JSON tag spellings
COURSE_TAG = "course number"
OR_TAG = "or"
AND_TAG = "and"

# Deepest combinator nesting accepted when decoding or encoding
MAX_PREREQUISITE_DEPTH = 128


@dataclass(frozen=True)
class RequiresCourse(Generic[C]):
    """Leaf: one course, which may not exist in any catalog."""
    course: C


@dataclass(frozen=True)
class RequiresAny(Generic[C]):
    """OR over the options. An empty option list can never be satisfied."""
    options: Tuple["Prerequisite[C]", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))


@dataclass(frozen=True)
class RequiresAll(Generic[C]):
    """AND over the requirements. An empty requirement list is always satisfied."""
    requirements: Tuple["Prerequisite[C]", ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "requirements", tuple(self.requirements))


Prerequisite = Union[RequiresCourse[C], RequiresAny[C], RequiresAll[C]]

# Prerequisites as they appear in catalog files, keyed by course number
CoursePrerequisite = Prerequisite[str]


def children(expr: Prerequisite) -> Tuple[Prerequisite, ...]:
    """Return the direct sub-expressions of a combinator, or () for a leaf."""
    if isinstance(expr, RequiresAny):
        return expr.options
    if isinstance(expr, RequiresAll):
        return expr.requirements
    return ()


# -----------------------------------------------------------------------------
# JSON decoding / encoding
# -----------------------------------------------------------------------------

def prerequisite_from_dict(data: Any, location: str = "prerequisite",
                           depth: int = 1) -> CoursePrerequisite:
    """
    Decode a tagged prerequisite object.

    Args:
        data: Parsed JSON value
        location: Path of ``data`` inside the document, used in error messages
        depth: Nesting level of ``data``; the top-level expression is 1

    Returns:
        The decoded expression tree

    Raises:
        MalformedPrerequisiteError: unknown tag, wrong payload type, or an
            object that does not carry exactly one tag, or combinators
            nested deeper than MAX_PREREQUISITE_DEPTH
    """
    if depth > MAX_PREREQUISITE_DEPTH:
        raise MalformedPrerequisiteError(
            f"nested too deeply (limit is {MAX_PREREQUISITE_DEPTH} levels)", location
        )
    if not isinstance(data, dict):
        raise MalformedPrerequisiteError(
            f"expected an object, got {type(data).__name__}", location
        )
    if len(data) != 1:
        raise MalformedPrerequisiteError(
            f"expected exactly one of '{COURSE_TAG}', '{OR_TAG}', '{AND_TAG}', "
            f"got {sorted(data)}", location
        )

    tag, payload = next(iter(data.items()))

    if tag == COURSE_TAG:
        if not isinstance(payload, str):
            raise MalformedPrerequisiteError(
                f"'{COURSE_TAG}' must be a string, got {type(payload).__name__}", location
            )
        return RequiresCourse(payload)

    if tag in (OR_TAG, AND_TAG):
        if not isinstance(payload, list):
            raise MalformedPrerequisiteError(
                f"'{tag}' must be a list, got {type(payload).__name__}", location
            )
        items = [
            prerequisite_from_dict(item, f"{location}.{tag}[{i}]", depth + 1)
            for i, item in enumerate(payload)
        ]
        return RequiresAny(items) if tag == OR_TAG else RequiresAll(items)

    raise MalformedPrerequisiteError(f"unknown prerequisite tag '{tag}'", location)


def prerequisite_depth(expr: Prerequisite) -> int:
    """Number of nested expression levels; a lone leaf is 1."""
    deepest = 0
    stack = [(expr, 1)]
    while stack:
        node, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in children(node))
    return deepest


def prerequisite_to_dict(expr: Prerequisite) -> Dict[str, Any]:
    """
    Encode an expression into its tagged JSON form.

    Raises:
        MalformedPrerequisiteError: the tree is nested deeper than
            MAX_PREREQUISITE_DEPTH, so it could not be decoded again
    """
    if prerequisite_depth(expr) > MAX_PREREQUISITE_DEPTH:
        raise MalformedPrerequisiteError(
            f"nested too deeply (limit is {MAX_PREREQUISITE_DEPTH} levels)"
        )
    return _encode(expr)


def _encode(expr: Prerequisite) -> Dict[str, Any]:
    if isinstance(expr, RequiresCourse):
        return {COURSE_TAG: expr.course}
    if isinstance(expr, RequiresAny):
        return {OR_TAG: [_encode(option) for option in expr.options]}
    if isinstance(expr, RequiresAll):
        return {AND_TAG: [_encode(req) for req in expr.requirements]}
    raise TypeError(f"Not a prerequisite expression: {expr!r}")


# -----------------------------------------------------------------------------
# Queries
# -----------------------------------------------------------------------------

def is_satisfied(expr: Prerequisite[C], completed: Set[C]) -> bool:
    """Check an expression against the set of already completed courses."""
    if isinstance(expr, RequiresCourse):
        return expr.course in completed
    if isinstance(expr, RequiresAny):
        return any(is_satisfied(option, completed) for option in expr.options)
    if isinstance(expr, RequiresAll):
        return all(is_satisfied(req, completed) for req in expr.requirements)
    raise TypeError(f"Not a prerequisite expression: {expr!r}")


def referenced_courses(expr: Prerequisite[C]) -> Set[C]:
    """Collect every course referenced by a leaf of the expression."""
    if isinstance(expr, RequiresCourse):
        return {expr.course}
    found: Set[C] = set()
    for child in children(expr):
        found |= referenced_courses(child)
    return found


def iter_references(expr: Prerequisite[C], parent: str = "single") -> Iterable[Tuple[C, str]]:
    """
    Yield (course, logic) for every leaf in depth-first order.

    ``logic`` is the kind of combinator that directly holds the leaf:
    "and", "or", or "single" for a leaf at the top of the tree.
    """
    if isinstance(expr, RequiresCourse):
        yield expr.course, parent
    elif isinstance(expr, RequiresAny):
        for option in expr.options:
            yield from iter_references(option, OR_TAG)
    elif isinstance(expr, RequiresAll):
        for req in expr.requirements:
            yield from iter_references(req, AND_TAG)


def map_courses(expr: Prerequisite[C], fn: Callable[[C], D]) -> Prerequisite[D]:
    """Rebuild the tree with every leaf reference passed through ``fn``."""
    if isinstance(expr, RequiresCourse):
        return RequiresCourse(fn(expr.course))
    if isinstance(expr, RequiresAny):
        return RequiresAny(map_courses(option, fn) for option in expr.options)
    if isinstance(expr, RequiresAll):
        return RequiresAll(map_courses(req, fn) for req in expr.requirements)
    raise TypeError(f"Not a prerequisite expression: {expr!r}")


def prerequisite_to_english(expr: Prerequisite) -> str:
    """Render an expression as readable text, e.g. 'CS101 and (CS201 or CS202)'."""

    def render(node: Prerequisite, nested: bool) -> str:
        if isinstance(node, RequiresCourse):
            return str(node.course)
        if isinstance(node, RequiresAny):
            if not node.options:
                return "nothing (unsatisfiable)"
            parts, joiner = node.options, " or "
        else:
            if not node.requirements:
                return "none"
            parts, joiner = node.requirements, " and "
        if len(parts) == 1:
            return render(parts[0], nested)
        text = joiner.join(render(part, True) for part in parts)
        return f"({text})" if nested else text

    return render(expr, False)
