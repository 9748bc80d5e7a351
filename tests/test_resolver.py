# ============================================================================
# LIVE RESOURCE RESOLVER TESTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tests - Rendered object -> live object resolution
# PURPOSE: Verify name lookup, label listing and disambiguation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Live Resource Resolver Tests

Covers:
1. Lookup by name (found / not found)
2. Label listing with a single candidate
3. Disambiguation by trait.oam.dev/resource, deterministic order
4. No candidates / several without a match
5. In-memory reader label selection

Run with:
    pytest tests/test_resolver.py -v
"""

import pytest

from cluster import GroupVersionKind, InMemoryClusterReader, Unstructured
from core.errors import AmbiguousResourceError, ResourceNotFoundError
from definition import LiveResourceResolver, get_resource_from_obj


COMMON = {
    "app.oam.dev/name": "shop",
    "app.oam.dev/component": "frontend",
    "trait.oam.dev/type": "ingress",
}


def _obj(kind, name="", labels=None, namespace="default", api_version="v1", **extra):
    metadata = {"namespace": namespace}
    if name:
        metadata["name"] = name
    if labels is not None:
        metadata["labels"] = labels
    obj = {"apiVersion": api_version, "kind": kind, "metadata": metadata}
    obj.update(extra)
    return obj


@pytest.fixture
def symbolic_service():
    """Rendered Service without a name."""
    return Unstructured({"apiVersion": "v1", "kind": "Service"})


# ============================================================================
# BY NAME
# ============================================================================

class TestResolveByName:
    """Objects with metadata.name are fetched directly."""

    def test_found(self, reader):
        live = _obj("Pod", "x", status={"phase": "Running"})
        reader.add(live)
        rendered = Unstructured({"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "x"}})

        resolved = LiveResourceResolver(reader).resolve(rendered, "default", COMMON)

        assert resolved == live

    def test_not_found(self, reader):
        rendered = Unstructured({"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "x"}})
        with pytest.raises(ResourceNotFoundError) as exc_info:
            LiveResourceResolver(reader).resolve(rendered, "default", COMMON)
        assert "Pod" in exc_info.value.gvk

    def test_other_namespace_is_not_found(self, reader):
        reader.add(_obj("Pod", "x", namespace="staging"))
        rendered = Unstructured({"apiVersion": "v1", "kind": "Pod", "metadata": {"name": "x"}})
        with pytest.raises(ResourceNotFoundError):
            LiveResourceResolver(reader).resolve(rendered, "default", COMMON)


# ============================================================================
# BY LABELS
# ============================================================================

class TestResolveByLabels:
    """Objects without a name are listed by label set."""

    def test_single_candidate(self, reader, symbolic_service):
        live = _obj("Service", "svc-1", labels=dict(COMMON))
        reader.add(live)
        reader.add(_obj("Service", "unrelated", labels={"app.oam.dev/name": "other"}))

        resolved = LiveResourceResolver(reader).resolve(symbolic_service, "default", COMMON)

        assert resolved["metadata"]["name"] == "svc-1"

    def test_single_candidate_ignores_qualifier(self, reader, symbolic_service):
        """The qualifier is not part of the listing selector."""
        reader.add(_obj("Service", "svc-1", labels=dict(COMMON)))

        resolved = LiveResourceResolver(reader).resolve(
            symbolic_service, "default", COMMON, outputs_resource="tls"
        )

        assert resolved["metadata"]["name"] == "svc-1"

    def test_ambiguity_resolved_by_qualifier(self, reader, symbolic_service):
        reader.add(_obj("Service", "svc-b", labels={**COMMON, "trait.oam.dev/resource": "b"}))
        reader.add(_obj("Service", "svc-a", labels={**COMMON, "trait.oam.dev/resource": "a"}))

        resolver = LiveResourceResolver(reader)
        assert resolver.resolve(symbolic_service, "default", COMMON, "a")["metadata"]["name"] == "svc-a"
        assert resolver.resolve(symbolic_service, "default", COMMON, "b")["metadata"]["name"] == "svc-b"

    def test_tie_break_is_sorted_by_name(self, reader, symbolic_service):
        labels = {**COMMON, "trait.oam.dev/resource": "a"}
        reader.add(_obj("Service", "zeta", labels=labels))
        reader.add(_obj("Service", "alpha", labels=labels))

        resolved = LiveResourceResolver(reader).resolve(symbolic_service, "default", COMMON, "a")

        assert resolved["metadata"]["name"] == "alpha"

    def test_empty_qualifier_matches_unlabeled(self, reader, symbolic_service):
        reader.add(_obj("Service", "svc-a", labels={**COMMON, "trait.oam.dev/resource": "a"}))
        reader.add(_obj("Service", "svc-plain", labels=dict(COMMON)))

        resolved = LiveResourceResolver(reader).resolve(symbolic_service, "default", COMMON)

        assert resolved["metadata"]["name"] == "svc-plain"

    def test_no_candidates(self, reader, symbolic_service):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            LiveResourceResolver(reader).resolve(symbolic_service, "default", COMMON)

        error = exc_info.value
        assert error.gvk == "v1, Kind=Service"
        assert error.labels == COMMON
        assert error.namespace == "default"

    def test_several_without_match_is_ambiguous(self, reader, symbolic_service):
        reader.add(_obj("Service", "svc-a", labels={**COMMON, "trait.oam.dev/resource": "a"}))
        reader.add(_obj("Service", "svc-b", labels={**COMMON, "trait.oam.dev/resource": "b"}))

        with pytest.raises(AmbiguousResourceError) as exc_info:
            LiveResourceResolver(reader).resolve(symbolic_service, "default", COMMON, "c")

        assert exc_info.value.details["candidates"] == ["svc-a", "svc-b"]

    def test_function_form(self, reader, symbolic_service):
        reader.add(_obj("Service", "svc-1", labels=dict(COMMON)))
        resolved = get_resource_from_obj(symbolic_service, reader, "default", COMMON)
        assert resolved["metadata"]["name"] == "svc-1"


# ============================================================================
# IN-MEMORY READER
# ============================================================================

class TestInMemoryClusterReader:
    """Test the in-memory reader used by tools and tests."""

    def test_reads_are_copies(self):
        reader = InMemoryClusterReader([_obj("Pod", "x")])
        gvk = GroupVersionKind("", "v1", "Pod")

        obj = reader.get_object(gvk, "default", "x")
        obj["metadata"]["name"] = "changed"

        assert reader.get_object(gvk, "default", "x")["metadata"]["name"] == "x"

    def test_list_filters_kind_and_namespace(self):
        reader = InMemoryClusterReader([
            _obj("Deployment", "web", api_version="apps/v1", labels={"a": "1"}),
            _obj("Pod", "web", labels={"a": "1"}),
            _obj("Deployment", "web", api_version="apps/v1", namespace="staging", labels={"a": "1"}),
        ])

        listed = reader.list_objects(GroupVersionKind("apps", "v1", "Deployment"), "default", {"a": "1"})

        assert len(listed) == 1
        assert listed[0]["kind"] == "Deployment"

    def test_gvk_from_api_version(self):
        assert GroupVersionKind.from_api_version("apps/v1", "Deployment") == GroupVersionKind(
            "apps", "v1", "Deployment"
        )
        assert GroupVersionKind.from_api_version("v1", "Pod").group == ""
        assert str(GroupVersionKind("apps", "v1", "Deployment")) == "apps/v1, Kind=Deployment"
