"""
Pytest fixtures for derivgen tests.
"""

import io
import logging

import pytest
import yaml
from PIL import Image

from derivgen.exceptions import StorageError
from derivgen.file_reference import FileReference


class FakeEntityStorage:
    """In-memory stand-in for EntityStorage."""

    def __init__(self, fields=None, errors=None):
        # {(entity_type, bundle, field_name): {entity_id: [file ids]}}
        self.fields = fields or {}
        # {(entity_type, bundle, field_name): exception}
        self.errors = errors or {}
        self.reset_calls = []
        self.load_calls = []

    def _field(self, entity_type, bundle, field_name):
        key = (entity_type, bundle, field_name)
        if key in self.errors:
            raise self.errors[key]
        return self.fields.get(key, {})

    def query_ids_with_field(self, entity_type, bundle, field_name):
        values = self._field(entity_type, bundle, field_name)
        return sorted(entity_id for entity_id, fids in values.items() if fids)

    def count_with_field(self, entity_type, bundle, field_name):
        return len(self.query_ids_with_field(entity_type, bundle, field_name))

    def load_field_targets(self, entity_type, field_name, entity_ids):
        self.load_calls.append((entity_type, field_name, list(entity_ids)))
        loaded = {}
        for (e_type, _, f_name), values in self.fields.items():
            if e_type == entity_type and f_name == field_name:
                for entity_id in entity_ids:
                    if entity_id in values:
                        loaded[entity_id] = list(values[entity_id])
        return loaded

    def reset_cache(self, entity_type, entity_ids=None):
        self.reset_calls.append((entity_type, list(entity_ids or [])))


class FakeFileStorage:
    """In-memory stand-in for FileStorage."""

    def __init__(self, files=None, fail_on=None):
        self.files = {f.fid: f for f in (files or [])}
        self.fail_on = set(fail_on or [])
        self.reset_calls = []
        self.load_calls = []

    def query_image_file_ids(self, mimetypes=None):
        return sorted(
            fid for fid, f in self.files.items()
            if f.filemime.startswith('image/')
        )

    def load_multiple(self, fids):
        self.load_calls.append(list(fids))
        if self.fail_on & set(fids):
            raise StorageError("connection lost")
        return [self.files[fid] for fid in fids if fid in self.files]

    def reset_cache(self, fids=None):
        self.reset_calls.append(list(fids or []))


def make_image_bytes(size=(200, 100), color='red', fmt='JPEG', mode='RGB'):
    img = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


def write_config(config_dir, name, data):
    path = config_dir / f"{name}.yml"
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


def write_display(config_dir, entity_type, bundle, mode, content, status=True):
    config_id = f"{entity_type}.{bundle}.{mode}"
    return write_config(config_dir, f"core.entity_view_display.{config_id}", {
        'langcode': 'en',
        'status': status,
        'id': config_id,
        'targetEntityType': entity_type,
        'bundle': bundle,
        'mode': mode,
        'content': content,
        'hidden': {},
    })


def image_component(style, formatter='image'):
    return {
        'type': formatter,
        'label': 'hidden',
        'settings': {'image_style': style, 'image_link': ''},
        'weight': 0,
        'region': 'content',
    }


def write_style(config_dir, name, effects):
    return write_config(config_dir, f"image.style.{name}", {
        'langcode': 'en',
        'status': True,
        'name': name,
        'label': name.title(),
        'effects': {
            f"uuid-{i}": {'uuid': f"uuid-{i}", 'id': effect_id, 'weight': i, 'data': data}
            for i, (effect_id, data) in enumerate(effects)
        },
    })


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def config_dir(tmp_path):
    """Empty config sync directory."""
    path = tmp_path / 'config' / 'sync'
    path.mkdir(parents=True)
    return path


@pytest.fixture
def public_dir(tmp_path):
    """Directory behind public://."""
    path = tmp_path / 'files'
    path.mkdir()
    return path


@pytest.fixture
def stream_wrappers(public_dir, logger):
    """Stream wrappers with only public:// registered."""
    from derivgen.local_client import LocalClient, LocalConfig
    from derivgen.stream_wrappers import StreamWrappers

    return StreamWrappers(
        {'public': LocalClient(LocalConfig(root_path=str(public_dir)), logger)},
        logger=logger,
    )


@pytest.fixture
def sample_image_bytes():
    """Fixture providing sample JPEG image bytes."""
    return make_image_bytes()


@pytest.fixture
def sample_png_bytes():
    """Fixture providing sample PNG image bytes with transparency."""
    return make_image_bytes(size=(100, 100), color=(255, 0, 0, 128), fmt='PNG', mode='RGBA')


@pytest.fixture
def thumb_site(config_dir, public_dir):
    """
    Style 'thumb' bound to node.article.teaser.field_image; three articles
    reference files 10, 11 and 12, none of which has a derivative yet.
    """
    write_style(config_dir, 'thumb', [('image_scale', {'width': 50, 'height': 50, 'upscale': False})])
    write_display(config_dir, 'node', 'article', 'teaser', {
        'field_image': image_component('thumb'),
        'body': {'type': 'text_default', 'settings': {}},
    })
    write_display(config_dir, 'node', 'article', 'full', {
        'field_image': image_component('large'),
    })

    (public_dir / 'images').mkdir()
    files = []
    for fid, name in ((10, 'a.jpg'), (11, 'b.jpg'), (12, 'c.jpg')):
        (public_dir / 'images' / name).write_bytes(make_image_bytes())
        files.append(FileReference(fid=fid, uri=f"public://images/{name}",
                                   filemime='image/jpeg', filename=name))

    entities = FakeEntityStorage({
        ('node', 'article', 'field_image'): {1: [10], 2: [11], 3: [12]},
    })
    return {
        'entities': entities,
        'files': FakeFileStorage(files),
    }


@pytest.fixture
def workflow_factory(config_dir, stream_wrappers, logger):
    """Build a DerivativeWorkflow over fake entity and file storage."""
    from derivgen.batch_executor import BatchExecutor
    from derivgen.display_scanner import DisplayScanner
    from derivgen.display_storage import DisplayStorage
    from derivgen.file_resolver import FileResolver
    from derivgen.image_style_storage import ImageStyleStorage
    from derivgen.usage import UsageInspector
    from derivgen.workflow import DerivativeWorkflow

    def build(entities, files, style_storage=None):
        styles = style_storage or ImageStyleStorage(str(config_dir), stream_wrappers, logger=logger)
        return DerivativeWorkflow(
            scanner=DisplayScanner(DisplayStorage(str(config_dir), logger), styles, logger),
            resolver=FileResolver(entities, files, logger),
            executor=BatchExecutor(files, stream_wrappers, logger=logger),
            inspector=UsageInspector(entities, logger),
            logger=logger,
        )

    return build
