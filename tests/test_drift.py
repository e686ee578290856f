"""Tests for keyward.drift: graph drift and mirror drift."""

from conftest import make_entry

from keyward.collect import Collector
from keyward.drift import compare_entries, drift, mirror_drift
from keyward.mappingfile import parse_mapping
from keyward.models import DiffKind


class TestGraphDrift:
    def test_no_drift(self):
        entries = [
            make_entry("K", "v", provider_name="a", source="s1"),
            make_entry("K", "v", provider_name="b", sink="s1"),
        ]
        assert drift(entries) == []

    def test_changed(self):
        src = make_entry("K", "v1", provider_name="a", source="s1")
        sink = make_entry("K", "v2", provider_name="b", sink="s1")
        drifts = drift([src, sink])
        assert len(drifts) == 1
        assert drifts[0].diff == DiffKind.CHANGED
        assert drifts[0].source is src
        assert drifts[0].target is sink

    def test_missing(self):
        drifts = drift([make_entry("K", "v", source="s1")])
        assert len(drifts) == 1
        assert drifts[0].diff == DiffKind.MISSING
        assert drifts[0].target is None

    def test_key_must_match(self):
        entries = [
            make_entry("K", "v", source="s1"),
            make_entry("OTHER", "v", sink="s1"),
        ]
        assert [d.diff for d in drift(entries)] == [DiffKind.MISSING]

    def test_multiple_sinks(self):
        entries = [
            make_entry("K", "v", provider_name="a", source="s1"),
            make_entry("K", "v", provider_name="b", sink="s1"),
            make_entry("K", "x", provider_name="c", sink="s1"),
            make_entry("K", "y", provider_name="d", sink="s1"),
        ]
        drifts = drift(entries)
        assert sorted(d.target.provider_name for d in drifts) == ["c", "d"]

    def test_untagged_entries_ignored(self):
        entries = [
            make_entry("K", "v1", provider_name="a"),
            make_entry("K", "v2", provider_name="b"),
        ]
        assert drift(entries) == []

    def test_sorted_by_source(self):
        entries = [
            make_entry("K", "v", source="zeta"),
            make_entry("K", "v", source="alpha"),
        ]
        assert [d.source.source for d in drift(entries)] == ["alpha", "zeta"]

    def test_provider_filter(self):
        entries = [
            make_entry("K", "v1", provider_name="a", source="s1"),
            make_entry("K", "v2", provider_name="b", sink="s1"),
            make_entry("J", "v", provider_name="c", source="s2"),
        ]
        drifts = drift(entries, ["a", "b"])
        assert len(drifts) == 1
        assert drifts[0].diff == DiffKind.CHANGED

    def test_entry_with_both_tags_is_only_a_source(self):
        entries = [
            make_entry("K", "v", provider_name="a", source="s1"),
            make_entry("K", "v", provider_name="b", sink="s1", source="s2"),
        ]
        drifts = drift(entries)
        assert [d.source.provider_name for d in drifts] == ["a", "b"]
        assert all(d.diff == DiffKind.MISSING for d in drifts)

    def test_self_tagged_entry_is_not_its_own_sink(self):
        drifts = drift([make_entry("K", "v", source="s1", sink="s1")])
        assert [d.diff for d in drifts] == [DiffKind.MISSING]


class TestMirrorDrift:
    def test_directional(self):
        source = [make_entry("A", "1"), make_entry("B", "2")]
        target = [make_entry("A", "1")]
        drifts = compare_entries(source, target)
        assert len(drifts) == 1
        assert drifts[0].diff == DiffKind.MISSING
        assert drifts[0].source.key == "B"
        assert compare_entries(target, source) == []

    def test_changed(self):
        drifts = compare_entries([make_entry("A", "1")], [make_entry("A", "9")])
        assert [d.diff for d in drifts] == [DiffKind.CHANGED]
        assert drifts[0].target.value == "9"

    def test_duplicate_target_key_first_wins(self):
        drifts = compare_entries(
            [make_entry("A", "1")],
            [make_entry("A", "1", provider_name="x"), make_entry("A", "2", provider_name="y")],
        )
        assert drifts == []

    def test_ignores_tags(self):
        drifts = compare_entries(
            [make_entry("A", "1", source="s")],
            [make_entry("A", "1", sink="other")],
        )
        assert drifts == []

    def test_against_collector(self, registry):
        mapping = parse_mapping(
            {
                "providers": {
                    "src": {
                        "kind": "inmem",
                        "options": {"data": {"ns/A": "1", "ns/B": "2"}},
                        "env_sync": {"path": "ns"},
                    },
                    "dst": {
                        "kind": "inmem",
                        "options": {"data": {"ns/A": "1", "ns/C": "3"}},
                        "env_sync": {"path": "ns"},
                    },
                }
            }
        )
        collector = Collector(mapping, registry)
        drifts = mirror_drift(collector, "src", "dst")
        assert [(d.diff, d.source.key) for d in drifts] == [(DiffKind.MISSING, "ns/B")]
        assert [d.source.key for d in mirror_drift(collector, "dst", "src")] == ["ns/C"]
