"""Tests for SiteConfig, DbConfig and GenerateOptions."""

import pytest

from derivgen.db_config import DbConfig
from derivgen.exceptions import ConfigError
from derivgen.generation_options import GenerateOptions, clamp_batch_size
from derivgen.site_config import SiteConfig, read_ini


@pytest.fixture
def site_ini(tmp_path, config_dir, public_dir):
    path = tmp_path / 'site.ini'
    path.write_text(
        "[site]\n"
        f"config_dir = {config_dir}\n"
        f"public_path = {public_dir}\n"
        "jpeg_quality = 85\n"
        "\n"
        "[database]\n"
        "name = drupal\n"
        "user = drupal\n"
        "prefix = d_\n"
        "\n"
        "[s3]\n"
        "bucket = site-files\n"
    )
    return path


class TestSiteConfig:
    """Tests for SiteConfig."""

    def test_defaults(self):
        config = SiteConfig.from_env({})

        assert config.public_path == 'sites/default/files'
        assert config.private_path is None
        assert config.default_scheme == 'public'
        assert config.jpeg_quality == 75
        assert config.s3 is None

    def test_from_env(self):
        config = SiteConfig.from_env({
            'DRUPAL_CONFIG_DIR': '/conf',
            'DRUPAL_PRIVATE_PATH': '/private',
            'DRUPAL_DB_NAME': 'site',
            'DRUPAL_DB_PORT': '3307',
            'S3_ENDPOINT': 'http://minio:9000',
        })

        assert config.config_dir == '/conf'
        assert config.private_path == '/private'
        assert config.db.database == 'site'
        assert config.db.port == 3307
        assert config.s3.endpoint == 'http://minio:9000'

    def test_load_ini(self, site_ini, config_dir, public_dir):
        config = SiteConfig.load(str(site_ini), environ={})

        assert config.config_dir == str(config_dir)
        assert config.public_path == str(public_dir)
        assert config.jpeg_quality == 85
        assert config.db.prefix == 'd_'
        assert config.s3.bucket == 'site-files'

    def test_env_overrides_ini(self, site_ini):
        config = SiteConfig.load(str(site_ini), environ={
            'DRUPAL_PUBLIC_PATH': '/srv/files',
            'DRUPAL_JPEG_QUALITY': '',
        })

        assert config.public_path == '/srv/files'
        assert config.jpeg_quality == 85

    def test_load_missing_ini(self, tmp_path):
        with pytest.raises(ConfigError):
            SiteConfig.load(str(tmp_path / 'nope.ini'), environ={})

    def test_load_bad_number(self):
        with pytest.raises(ConfigError):
            SiteConfig.load(environ={'DRUPAL_JPEG_QUALITY': 'high'})

    def test_read_ini_ignores_unknown_keys(self, tmp_path):
        path = tmp_path / 'site.ini'
        path.write_text("[site]\nconfig_dir = /c\ncolour = blue\n[other]\nx = 1\n")

        assert read_ini(str(path)) == {'DRUPAL_CONFIG_DIR': '/c'}

    def test_validate_ok(self, site_ini):
        assert SiteConfig.load(str(site_ini), environ={}).validate() == []

    def test_validate_errors(self, tmp_path):
        config = SiteConfig(
            config_dir=str(tmp_path / 'missing'),
            public_path=str(tmp_path),
            default_scheme='temporary',
            jpeg_quality=0,
        )

        errors = config.validate()

        assert len(errors) == 5
        assert any('Config directory does not exist' in e for e in errors)

    def test_validate_without_db(self, config_dir, public_dir):
        config = SiteConfig(config_dir=str(config_dir), public_path=str(public_dir))

        assert config.validate(require_db=False) == []

    def test_validate_requires_config_dir(self, public_dir):
        errors = SiteConfig(public_path=str(public_dir)).validate(require_db=False)

        assert errors == ["Config directory is required (DRUPAL_CONFIG_DIR or --config-dir)"]

    def test_validate_missing_public_path(self, config_dir, tmp_path):
        """Test a public path that is not a directory is reported."""
        config = SiteConfig(config_dir=str(config_dir), public_path=str(tmp_path / 'files'))

        errors = config.validate(require_db=False)

        assert len(errors) == 1
        assert errors[0].startswith('public:// ')
        assert str(tmp_path / 'files') in errors[0]

    def test_validate_relative_default_public_path(self, config_dir, tmp_path, monkeypatch):
        """Test the default public path is checked against the working directory."""
        monkeypatch.chdir(tmp_path)

        assert SiteConfig(config_dir=str(config_dir)).validate(require_db=False)

        (tmp_path / 'sites' / 'default' / 'files').mkdir(parents=True)
        assert SiteConfig(config_dir=str(config_dir)).validate(require_db=False) == []

    def test_validate_private_path(self, config_dir, public_dir, tmp_path):
        """Test private path is checked only when set."""
        config = SiteConfig(
            config_dir=str(config_dir),
            public_path=str(public_dir),
            private_path=str(tmp_path / 'private'),
        )

        errors = config.validate(require_db=False)

        assert len(errors) == 1
        assert errors[0].startswith('private:// ')

        (tmp_path / 'private').mkdir()
        assert config.validate(require_db=False) == []


class TestDbConfig:
    """Tests for DbConfig."""

    def test_from_env_defaults(self):
        config = DbConfig.from_env({})

        assert config.host == 'localhost'
        assert config.port == 3306
        assert config.pool_size == 4

    def test_validate(self):
        assert DbConfig(database='d', user='u').validate() == []
        assert len(DbConfig(pool_size=0).validate()) == 3


class TestGenerateOptions:
    """Tests for GenerateOptions."""

    @pytest.mark.parametrize('value,expected', [(0, 1), (-3, 1), (1, 1), (20, 20), (50, 50), (51, 50)])
    def test_clamp_batch_size(self, value, expected):
        assert clamp_batch_size(value) == expected
        assert GenerateOptions(batch_size=value).batch_size == expected

    def test_defaults(self):
        options = GenerateOptions()

        assert options.batch_size == 20
        assert options.limit == 0
        assert not options.has_filters

    def test_normalizes(self):
        options = GenerateOptions(limit=-4, batch_size=None, bundle=None, field='field_image')

        assert options.limit == 0
        assert options.batch_size == 20
        assert options.bundle == ''
        assert options.has_filters

    def test_apply_limit(self):
        assert GenerateOptions(limit=2).apply_limit([5, 6, 7]) == [5, 6]
        assert GenerateOptions(limit=10).apply_limit([5, 6, 7]) == [5, 6, 7]
        assert GenerateOptions().apply_limit([5, 6, 7]) == [5, 6, 7]
