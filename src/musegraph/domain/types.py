"""Node kinds, relation labels, and stub policy enums."""

from __future__ import annotations

from enum import StrEnum


class NodeKind(StrEnum):
    """The three entity kinds fused into the graph."""

    PERFORMER = "performer"
    WORK = "work"
    COLLECTION = "collection"


class Relation(StrEnum):
    """Fixed edge label vocabulary.

    Base-relations edges may carry labels outside this set; those are
    stored verbatim as plain strings.
    """

    PERFORMS = "performs"
    WRITES = "writes"
    PRODUCES = "produces"
    RELEASED_BY = "released-by"
    CONTAINS = "contains"
    CONNECTED = "connected"
    CREDITED = "credited"


class StubPolicy(StrEnum):
    """What the builder does with an edge whose endpoint is not declared."""

    AUTO_STUB = "auto-stub"
    STRICT = "strict"


def parse_kinds(names: list[str] | tuple[str, ...] | None) -> frozenset[NodeKind] | None:
    """Parse kind names (case-insensitive) into a filter set.

    Accepts the legacy upper-case aliases ``ARTIST``/``SONG``/``ALBUM``.
    Returns None for an empty or missing filter. Raises ``ValueError``
    on an unknown name.

    Examples:
        >>> sorted(parse_kinds(["work", "ARTIST"]))
        [<NodeKind.PERFORMER: 'performer'>, <NodeKind.WORK: 'work'>]
        >>> parse_kinds([]) is None
        True
    """
    if not names:
        return None
    kinds: set[NodeKind] = set()
    for raw in names:
        key = raw.strip().lower()
        key = _KIND_ALIASES.get(key, key)
        kinds.add(NodeKind(key))
    return frozenset(kinds)


_KIND_ALIASES: dict[str, str] = {
    "artist": NodeKind.PERFORMER.value,
    "song": NodeKind.WORK.value,
    "album": NodeKind.COLLECTION.value,
}
