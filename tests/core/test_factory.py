"""Tests for factory.py - building workspace graphs from configuration."""

import json
from pathlib import Path

import pytest

from atlasgraph.config import DEFAULT_CONFIG, merge_configs
from atlasgraph.graph.factory import (
    build_workspace_graph,
    placement_from_config,
    resolve_store_path,
    rng_from_config,
)
from atlasgraph.store import JsonDocumentStore, StoreError
from tests.core.graph_test_helpers import board_record


@pytest.fixture
def store(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(
        json.dumps(
            [
                board_record("b1", "w1", nodes=[("1", "Roadmap"), ("2", "[[Budget]]")], edges=[("1", "2")]),
                board_record("b2", "w1", nodes=[("1", "Budget")]),
                board_record("b3", "w2", nodes=[("1", "Elsewhere")]),
            ]
        )
    )
    return JsonDocumentStore(path)


class TestResolveStorePath:
    def test_relative_path_uses_base_dir(self, tmp_path):
        config = {"store": {"path": "data/export.json"}}
        assert resolve_store_path(config, tmp_path) == tmp_path / "data" / "export.json"

    def test_absolute_path_kept(self, tmp_path):
        absolute = tmp_path / "export.json"
        config = {"store": {"path": str(absolute)}}
        assert resolve_store_path(config, Path("/elsewhere")) == absolute


class TestPlacementAndSeed:
    def test_placement_from_config(self):
        config = merge_configs(DEFAULT_CONFIG, {"placement": {"width": 300, "height": 200}})
        box = placement_from_config(config)
        assert (box.width, box.height) == (300.0, 200.0)

    def test_configured_seed_is_repeatable(self):
        config = merge_configs(DEFAULT_CONFIG, {"placement": {"seed": 9}})
        assert rng_from_config(config).random() == rng_from_config(config).random()

    def test_explicit_seed_wins(self):
        config = merge_configs(DEFAULT_CONFIG, {"placement": {"seed": 9}})
        assert rng_from_config(config, seed=3).random() == rng_from_config({}, seed=3).random()


class TestBuildWorkspaceGraph:
    def test_builds_only_requested_workspace(self, store):
        graph = build_workspace_graph("w1", store, DEFAULT_CONFIG, seed=1)

        assert {n.source_document_id for n in graph.nodes} == {"b1", "b2"}
        assert graph.stats()["reference_edges"] == 1

    def test_unknown_workspace_is_empty(self, store):
        graph = build_workspace_graph("nope", store, DEFAULT_CONFIG)

        assert graph.node_count() == 0
        assert graph.edges == []

    def test_positions_within_placement_box(self, store):
        config = merge_configs(DEFAULT_CONFIG, {"placement": {"width": 50, "height": 20}})

        graph = build_workspace_graph("w1", store, config, seed=4)

        for node in graph.nodes:
            assert 0 <= node.position.x <= 50
            assert 0 <= node.position.y <= 20

    def test_missing_store_raises(self, tmp_path):
        with pytest.raises(StoreError):
            build_workspace_graph("w1", JsonDocumentStore(tmp_path / "none.json"), DEFAULT_CONFIG)
