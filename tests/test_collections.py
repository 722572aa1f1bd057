# tests/test_collections.py
"""
Tests for CollectionManager and collection name validation.
"""

from __future__ import annotations

import pytest

from ragdepot.core.exceptions import CollectionNotFoundError, ConfigurationError
from ragdepot.core.paths import RagPaths, validate_collection_name
from ragdepot.core.records import CollectionSettings, EmbeddingRecord
from ragdepot.storage.collections import CollectionManager

pytestmark = pytest.mark.tier2

SETTINGS = CollectionSettings(
    chunk_size=500, chunk_overlap=50, checkpoint_interval=50, embedding_model="text-embedding-3-small"
)


@pytest.fixture
def manager(tmp_path):
    return CollectionManager(tmp_path / "collections", tmp_path / "chunks")


def populate(manager: CollectionManager, name: str, count: int = 2, with_chunks: bool = False):
    records = [
        EmbeddingRecord(text=f"{name} {i}", vector=[1.0, float(i)], metadata={"chunkId": f"{name}-{i}"})
        for i in range(count)
    ]
    manager.store(name).save(records, settings=SETTINGS)
    if with_chunks:
        path = manager.chunks_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("[]", encoding="utf-8")


class TestListing:
    def test_empty_when_directory_missing(self, manager):
        assert manager.list_collections() == []

    def test_sorted_with_counts(self, manager):
        populate(manager, "zeta", 1)
        populate(manager, "alpha", 3)

        infos = manager.list_collections()
        assert [(i.name, i.embedding_count) for i in infos] == [("alpha", 3), ("zeta", 1)]
        assert infos[0].settings == SETTINGS
        assert infos[0].file_size_bytes > 0

    def test_unreadable_collection_is_skipped(self, manager):
        populate(manager, "good")
        manager.embeddings_path("bad").write_text("{broken", encoding="utf-8")
        assert [i.name for i in manager.list_collections()] == ["good"]

    def test_temp_files_are_not_collections(self, manager):
        populate(manager, "good")
        tmp = manager.embeddings_path("good")
        tmp.with_name(tmp.name + ".tmp").write_text("[]", encoding="utf-8")
        assert [i.name for i in manager.list_collections()] == ["good"]


class TestInfo:
    def test_reports_chunks_file(self, manager):
        populate(manager, "docs", with_chunks=True)
        info = manager.get_info("docs")
        assert info.chunks_exists
        assert info.embeddings_path.name == "docs.embeddings.json"

    def test_missing_collection(self, manager):
        with pytest.raises(CollectionNotFoundError, match="'nope' not found"):
            manager.get_info("nope")

    def test_exists(self, manager):
        populate(manager, "docs")
        assert manager.exists("docs")
        assert not manager.exists("other")


class TestMutation:
    def test_delete_removes_both_files(self, manager):
        populate(manager, "docs", with_chunks=True)
        manager.delete("docs")
        assert not manager.embeddings_path("docs").exists()
        assert not manager.chunks_path("docs").exists()

    def test_delete_missing(self, manager):
        with pytest.raises(CollectionNotFoundError):
            manager.delete("nope")

    def test_rename_moves_both_files(self, manager):
        populate(manager, "old", count=3, with_chunks=True)
        manager.rename("old", "new")

        assert not manager.exists("old")
        assert manager.get_info("new").embedding_count == 3
        assert manager.chunks_path("new").exists()

    def test_rename_refuses_to_overwrite(self, manager):
        populate(manager, "a")
        populate(manager, "b")
        with pytest.raises(ConfigurationError, match="already exists"):
            manager.rename("a", "b")
        assert manager.get_info("b").embedding_count == 2


class TestNames:
    @pytest.mark.parametrize("name", ["docs", "Docs_v2", "team-a.notes", "0day"])
    def test_valid(self, name):
        assert validate_collection_name(name) == name

    @pytest.mark.parametrize("name", ["", "../etc", "a/b", ".hidden", "a..b", "with space"])
    def test_invalid(self, name):
        with pytest.raises(ConfigurationError):
            validate_collection_name(name)

    def test_paths_follow_workspace(self, workspace):
        assert RagPaths.embeddings("docs") == workspace / "collections" / "docs.embeddings.json"
        assert RagPaths.chunks("docs") == workspace / "chunks" / "docs.chunks.json"
