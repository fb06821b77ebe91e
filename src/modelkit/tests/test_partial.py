"""Tests for partial values, merging and snapshot streaming."""

from __future__ import annotations

import pytest

from modelkit.errors import GenerationIncomplete, SchemaMismatch, SchemaViolation
from modelkit.schema import (
    ABSENT,
    Partial,
    Range,
    empty,
    integer,
    list_of,
    merge,
    stream_partials,
    string,
    struct,
)

REVIEW = struct(
    "Review",
    title=string(),
    rating=integer(Range(1, 10)),
    themes=list_of(string()),
)

PLACE = struct(
    "Place",
    name=string(),
    location=struct("Location", city=string(), zip=string()),
)


async def fragments(*items: object):
    for item in items:
        yield item


# ─────────────────────────────────────────────────────────────────────────────
# Merge
# ─────────────────────────────────────────────────────────────────────────────

class TestMerge:
    def test_empty_snapshot(self) -> None:
        assert empty(REVIEW) == {"title": ABSENT, "rating": ABSENT, "themes": ABSENT}

    def test_presence_is_monotonic(self) -> None:
        steps = [
            {"title": "Dune"},
            {"rating": 8},
            {"title": ABSENT, "rating": None},
            {"themes": ["power"]},
            {"themes": ["power", "ecology"], "title": None},
        ]
        current = empty(REVIEW)
        present: set[str] = set()
        for step in steps:
            current = merge(REVIEW, current, step)
            now = {k for k, v in current.items() if v is not ABSENT}
            assert present <= now
            present = now
        assert current == {"title": "Dune", "rating": 8, "themes": ["power", "ecology"]}

    def test_fragment_wins_conflicts(self) -> None:
        first = merge(REVIEW, empty(REVIEW), {"title": "Dune"})
        assert merge(REVIEW, first, {"title": "Dune: Part Two"})["title"] == "Dune: Part Two"

    def test_inputs_are_not_modified(self) -> None:
        previous = merge(REVIEW, empty(REVIEW), {"title": "Dune", "themes": ["a"]})
        snapshot = {"title": "Dune", "rating": ABSENT, "themes": ["a"]}
        fragment = {"themes": ["a", "b"]}
        merge(REVIEW, previous, fragment)
        assert previous == snapshot
        assert fragment == {"themes": ["a", "b"]}

    def test_list_merge_is_positional(self) -> None:
        previous = merge(REVIEW, empty(REVIEW), {"themes": ["a", "b"]})
        assert merge(REVIEW, previous, {"themes": ["x"]})["themes"] == ["x", "b"]

    def test_nested_struct_starts_absent(self) -> None:
        value = merge(PLACE, empty(PLACE), {"location": {"city": "Austin"}})
        assert value == {"name": ABSENT, "location": {"city": "Austin", "zip": ABSENT}}

    def test_unknown_field_is_rejected(self) -> None:
        with pytest.raises(SchemaMismatch) as exc:
            merge(REVIEW, empty(REVIEW), {"bogus": 1})
        assert exc.value.path == "bogus"

    @pytest.mark.parametrize(("fragment", "path"), [
        ({"themes": "not a list"}, "themes"),
        ({"title": {"nested": True}}, "title"),
        ({"location": "Austin"}, "location"),
    ])
    def test_shape_mismatch(self, fragment: dict[str, object], path: str) -> None:
        schema = PLACE if "location" in fragment else REVIEW
        with pytest.raises(SchemaMismatch) as exc:
            merge(schema, empty(schema), fragment)
        assert exc.value.path == path


# ─────────────────────────────────────────────────────────────────────────────
# Partial view
# ─────────────────────────────────────────────────────────────────────────────

class TestPartial:
    def test_fresh_partial_is_all_absent(self) -> None:
        snap = Partial(REVIEW)
        assert snap.get("title") is ABSENT
        assert snap.missing_paths() == ["title", "rating", "themes"]
        assert not snap.is_complete

    def test_dotted_lookup(self) -> None:
        snap = Partial(PLACE, merge(PLACE, empty(PLACE), {"location": {"city": "Austin"}}))
        assert snap.get("location.city") == "Austin"
        assert snap.get("location.zip") is ABSENT
        assert snap.is_present("location.city")
        assert not snap.is_present("name")
        assert snap.missing_paths() == ["name", "location.zip"]

    def test_present_strips_absent_fields(self) -> None:
        snap = Partial(PLACE, merge(PLACE, empty(PLACE), {"location": {"city": "Austin"}}))
        assert snap.present() == {"location": {"city": "Austin"}}

    def test_to_value_requires_completeness(self) -> None:
        snap = Partial(REVIEW, merge(REVIEW, empty(REVIEW), {"title": "Dune"}))
        with pytest.raises(GenerationIncomplete) as exc:
            snap.to_value()
        assert exc.value.missing == ("rating", "themes")

    def test_complete_value(self) -> None:
        value = {"title": "Dune", "rating": 8, "themes": []}
        snap = Partial(REVIEW, merge(REVIEW, empty(REVIEW), value))
        assert snap.is_complete
        assert snap.to_value() == value


# ─────────────────────────────────────────────────────────────────────────────
# Streaming
# ─────────────────────────────────────────────────────────────────────────────

class TestStreamPartials:
    @pytest.mark.asyncio
    async def test_one_snapshot_per_fragment(self) -> None:
        source = fragments({"title": "Dune"}, {"rating": 8}, {"themes": ["power"]})
        snaps = [s async for s in stream_partials(REVIEW, source)]
        assert len(snaps) == 3
        assert snaps[0].get("title") == "Dune" and snaps[0].get("rating") is ABSENT
        assert snaps[-1].to_value() == {"title": "Dune", "rating": 8, "themes": ["power"]}

    @pytest.mark.asyncio
    async def test_incomplete_stream_raises_after_snapshots(self) -> None:
        seen: list[Partial] = []
        with pytest.raises(GenerationIncomplete):
            async for snap in stream_partials(REVIEW, fragments({"title": "Dune"})):
                seen.append(snap)
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_invalid_final_value_raises(self) -> None:
        source = fragments({"title": "Dune", "rating": 11, "themes": []})
        with pytest.raises(SchemaViolation) as exc:
            async for _ in stream_partials(REVIEW, source):
                pass
        assert exc.value.field_path == "rating"

    @pytest.mark.asyncio
    async def test_mismatched_fragment_stops_the_stream(self) -> None:
        with pytest.raises(SchemaMismatch):
            async for _ in stream_partials(REVIEW, fragments({"title": "Dune"}, {"director": "Villeneuve"})):
                pass

    @pytest.mark.asyncio
    async def test_closing_early_closes_the_source(self) -> None:
        closed: list[bool] = []

        async def source():
            try:
                yield {"title": "Dune"}
                yield {"rating": 8}
            finally:
                closed.append(True)

        stream = stream_partials(REVIEW, source())
        first = await anext(stream)
        await stream.aclose()
        assert first.get("title") == "Dune"
        assert closed == [True]
