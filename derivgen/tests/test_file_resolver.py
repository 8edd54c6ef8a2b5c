"""Tests for FileResolver."""

import pytest

from derivgen.display import DisplayBinding
from derivgen.exceptions import StorageError
from derivgen.file_reference import FileReference
from derivgen.file_resolver import FileResolver

from .conftest import FakeEntityStorage, FakeFileStorage

ARTICLE = DisplayBinding('node', 'article', 'teaser', 'field_image')
PAGE = DisplayBinding('node', 'page', 'teaser', 'field_image')
ADVERT = DisplayBinding('node', 'advert', 'teaser', 'field_photo')


@pytest.fixture
def entities():
    return FakeEntityStorage({
        ('node', 'article', 'field_image'): {3: [12], 1: [10, 11], 2: []},
        ('node', 'page', 'field_image'): {5: [11, 13]},
    })


class TestResolve:
    """Tests for referenced-file resolution."""

    def test_single_binding(self, entities, logger):
        """Test ids come out in entity then delta order."""
        resolver = FileResolver(entities, FakeFileStorage(), logger)

        resolved = resolver.resolve([ARTICLE])

        assert resolved.file_ids == [10, 11, 12]
        assert resolved.skipped_sources == 0

    def test_deduplicates_across_bindings(self, entities, logger):
        """Test first-seen order is kept across bindings."""
        resolver = FileResolver(entities, FakeFileStorage(), logger)

        resolved = resolver.resolve([ARTICLE, PAGE])

        assert resolved.file_ids == [10, 11, 12, 13]

    def test_empty_bindings(self, entities, logger):
        """Test no bindings means no files."""
        assert FileResolver(entities, FakeFileStorage(), logger).resolve([]).file_ids == []

    def test_entity_cache_reset(self, entities, logger):
        """Test loaded entities are released after each binding."""
        FileResolver(entities, FakeFileStorage(), logger).resolve([ARTICLE, PAGE])

        assert entities.reset_calls == [('node', [1, 3]), ('node', [5])]

    def test_storage_error_skips_binding(self, entities, logger, caplog):
        """Test a failing binding is skipped and the rest kept."""
        entities.errors[('node', 'advert', 'field_photo')] = StorageError("no such table")
        resolver = FileResolver(entities, FakeFileStorage(), logger)

        resolved = resolver.resolve([ADVERT, ARTICLE])

        assert resolved.file_ids == [10, 11, 12]
        assert resolved.skipped_sources == 1
        assert resolved.failures[0].source == 'node.advert.teaser: field_photo'
        assert not resolved.failures[0].is_fatal
        assert any(r.levelname == 'ERROR' for r in caplog.records)

    def test_resolve_binding_no_entities(self, logger):
        """Test a binding with no populated entities resolves to nothing."""
        entities = FakeEntityStorage()
        resolver = FileResolver(entities, FakeFileStorage(), logger)

        result = resolver.resolve_binding(ARTICLE)

        assert result.ok
        assert result.value == []
        assert entities.load_calls == []


class TestResolveAllFiles:
    """Tests for all-files mode."""

    def test_all_images(self, entities, logger):
        """Test every image file is returned and bindings are ignored."""
        files = FakeFileStorage([
            FileReference(30, 'public://c.gif', 'image/gif'),
            FileReference(7, 'public://a.jpg', 'image/jpeg'),
            FileReference(9, 'public://doc.pdf', 'application/pdf'),
        ])
        resolver = FileResolver(entities, files, logger)

        resolved = resolver.resolve([ARTICLE], all_files=True)

        assert resolved.file_ids == [7, 30]
        assert entities.load_calls == []

    def test_query_failure(self, entities, logger, mocker):
        """Test a failing file query is a recoverable failure."""
        files = FakeFileStorage()
        mocker.patch.object(files, 'query_image_file_ids', side_effect=StorageError("down"))

        resolved = FileResolver(entities, files, logger).resolve([], all_files=True)

        assert resolved.file_ids == []
        assert resolved.skipped_sources == 1
