"""
Tests for LinkIndex browsing, search, stats and export
"""

import json

import pytest

from lincat.link_index import LinkIndex
from lincat.storage import SQLiteStorage

from .fixtures import create_categorizer


@pytest.fixture
async def populated():
    """Storage with three links in two categories for alice and one for bob"""
    storage = SQLiteStorage(":memory:")
    categorizer = create_categorizer(storage)
    repo = await categorizer.categorize("https://github.com/acme/widgets", "alice")
    video = await categorizer.categorize("https://youtu.be/abc123", "alice")
    note = await categorizer.categorize("Buy milk and eggs tomorrow", "alice")
    await categorizer.categorize("https://github.com/bob/secret", "bob")
    yield storage, {"repo": repo, "video": video, "note": note}
    storage.close()


class TestBrowse:
    """Listing categories and links"""

    async def test_list_categories(self, populated):
        storage, _ = populated
        index = LinkIndex(storage, "alice")

        names = {c.name: c.link_count for c in index.list_categories()}

        assert names == {"Code Repositories": 1, "YouTube Videos": 1, "Personal Notes": 1}

    async def test_find_category_by_name_or_id(self, populated):
        storage, _ = populated
        index = LinkIndex(storage, "alice")

        category = index.find_category("code repositories")

        assert category.name == "Code Repositories"
        assert index.find_category(category.id).name == "Code Repositories"
        assert index.find_category("Nope") is None

    async def test_get_all_is_owner_scoped(self, populated):
        storage, links = populated
        index = LinkIndex(storage, "alice")

        views = index.get_all()

        assert {v.id for v in views} == {links["repo"].id, links["video"].id, links["note"].id}
        assert all("bob" not in v.url for v in views)

    async def test_get_by_category(self, populated):
        storage, links = populated
        index = LinkIndex(storage, "alice")
        category = index.find_category("YouTube Videos")

        views = index.get_by_category(category.id)

        assert [v.id for v in views] == [links["video"].id]
        assert views[0].category == "YouTube Videos"

    async def test_get(self, populated):
        storage, links = populated
        index = LinkIndex(storage, "alice")

        view = index.get(links["note"].id)

        assert view.title == "Buy milk and eggs tomorrow"
        assert view.category == "Personal Notes"
        assert LinkIndex(storage, "bob").get(links["note"].id) is None


class TestSearch:
    """Test LinkIndex.search()"""

    async def test_search_matches_title(self, populated):
        storage, links = populated

        results = LinkIndex(storage, "alice").search("widgets")

        assert [v.id for v in results] == [links["repo"].id]

    async def test_search_no_results(self, populated):
        storage, _ = populated

        assert LinkIndex(storage, "alice").search("secret") == []


class TestRemove:
    """Deleting categories and links"""

    async def test_remove_category_cascades(self, populated):
        """Test links of a deleted category are no longer found"""
        storage, links = populated
        index = LinkIndex(storage, "alice")
        category = index.find_category("Code Repositories")

        assert index.remove_category(category.id) is True

        assert index.get(links["repo"].id) is None
        assert index.get(links["video"].id) is not None
        assert index.find_category("Code Repositories") is None

    async def test_remove_link(self, populated):
        storage, links = populated
        index = LinkIndex(storage, "alice")

        assert index.remove(links["video"].id) is True
        assert index.remove(links["video"].id) is False
        assert index.find_category("YouTube Videos").link_count == 0


class TestStatsAndExport:
    """Test get_stats() and exports"""

    async def test_stats(self, populated):
        storage, _ = populated

        stats = LinkIndex(storage, "alice").get_stats()

        assert stats["total"] == 3
        assert stats["urls"] == 2
        assert stats["notes"] == 1
        assert stats["categories"]["Code Repositories"] == 1

    async def test_export_json(self, populated):
        storage, _ = populated

        data = json.loads(LinkIndex(storage, "alice").export_json())

        assert len(data) == 3
        assert {"originalInput", "aiDescription", "category"} <= set(data[0])

    async def test_export_markdown(self, populated):
        storage, _ = populated

        output = LinkIndex(storage, "alice").export_markdown()

        assert output.startswith("# Saved Links")
        assert "## Code Repositories" in output
        assert "- [acme/widgets - GitHub Repository](https://github.com/acme/widgets)" in output
        assert "- Buy milk and eggs tomorrow" in output
