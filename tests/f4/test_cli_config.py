"""Tests for the config loader, service wiring and CLI (F4)."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from trackacademia.auth.memory_provider import MemoryIdentityProvider
from trackacademia.bootstrap import build_identity_provider, build_services, build_store, build_uploader
from trackacademia.cli.commands import app
from trackacademia.config.app_config import (
    AppConfig,
    AuthConfig,
    StoreConfig,
    UploadConfig,
    clear_config_cache,
    load_app_config,
)
from trackacademia.core.uploads import CloudinaryUploader
from trackacademia.db.memory_store import MemoryDocumentStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_config():
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "app_config.yaml"
    path.write_text(
        "store:\n"
        "  backend: memory\n"
        "auth:\n"
        "  backend: firebase\n"
        "  api_key_env: TEST_FIREBASE_KEY\n"
        "uploads:\n"
        "  backend: cloudinary\n"
        "  cloud_name: demo\n"
        "  upload_preset: unsigned\n"
        "  max_bytes: 2097152\n"
        "routes:\n"
        "  sign_in: /login\n"
        "web:\n"
        "  cors_origins:\n"
        "    - https://study.example\n",
        encoding="utf-8",
    )
    return path


class TestLoadAppConfig:
    """Tests for load_app_config."""

    def test_defaults_when_file_missing(self, tmp_path):
        config = load_app_config(config_file=tmp_path / "missing.yaml")
        assert config.store.backend == "memory"
        assert config.auth.backend == "memory"
        assert config.uploads.backend == "disabled"
        assert config.uploads.max_bytes == 10 * 1024 * 1024
        assert config.routes.profile_setup == "/degree-setup"
        assert config.web.cors_origins == ("http://localhost:3000", "http://127.0.0.1:3000")

    def test_reads_yaml(self, config_file):
        config = load_app_config(config_file=config_file)
        assert config.auth.backend == "firebase"
        assert config.auth.api_key_env == "TEST_FIREBASE_KEY"
        assert config.uploads.cloud_name == "demo"
        assert config.uploads.max_bytes == 2 * 1024 * 1024
        assert "image/webp" in config.uploads.allowed_types
        assert config.routes.sign_in == "/login"
        assert config.routes.profile_setup == "/degree-setup"
        assert config.web.cors_origins == ("https://study.example",)

    def test_cached_until_forced(self, config_file, tmp_path):
        first = load_app_config(config_file=config_file)
        assert load_app_config(config_file=tmp_path / "missing.yaml") is first
        reloaded = load_app_config(force_reload=True, config_file=tmp_path / "missing.yaml")
        assert reloaded.auth.backend == "memory"

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("TEST_FIREBASE_KEY", "abc")
        assert AuthConfig(api_key_env="TEST_FIREBASE_KEY").get_api_key() == "abc"
        assert AuthConfig(api_key_env=None).get_api_key() is None


class TestBootstrap:
    """Tests for backend selection."""

    def test_memory_defaults(self):
        services = build_services(AppConfig())
        assert isinstance(services.gateway.store, MemoryDocumentStore)
        assert isinstance(services.identity.provider, MemoryIdentityProvider)
        assert services.uploader is None
        assert services.session.state.is_loading is True

    def test_unknown_backends(self):
        with pytest.raises(ValueError):
            build_store(StoreConfig(backend="sqlite"))
        with pytest.raises(ValueError):
            build_identity_provider(AuthConfig(backend="ldap"))
        with pytest.raises(ValueError):
            build_uploader(UploadConfig(backend="s3"))

    def test_firebase_without_key(self, monkeypatch):
        monkeypatch.delenv("TEST_FIREBASE_KEY", raising=False)
        with pytest.raises(ValueError):
            build_identity_provider(
                AuthConfig(backend="firebase", api_key_env="TEST_FIREBASE_KEY")
            )

    def test_cloudinary_uploader(self):
        uploader = build_uploader(
            UploadConfig(backend="cloudinary", cloud_name="demo", upload_preset="u")
        )
        assert isinstance(uploader, CloudinaryUploader)

    @pytest.mark.asyncio
    async def test_start_and_close(self):
        services = build_services(AppConfig())
        await services.start()
        assert services.session.is_active
        assert services.session.state.is_loading is False
        await services.aclose()
        assert not services.session.is_active


class TestCli:
    """Tests for the CLI commands."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "serve" in result.output
        assert "config" in result.output

    def test_config_shows_effective_settings(self, config_file):
        result = runner.invoke(app, ["config", "--file", str(config_file)])
        assert result.exit_code == 0
        assert "firebase" in result.output
        assert "cloudinary" in result.output
        assert "/login" in result.output
        assert "https://study.example" in result.output

    def test_config_missing_file(self, tmp_path):
        result = runner.invoke(app, ["config", "--file", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_serve_runs_uvicorn(self):
        with patch("trackacademia.cli.commands.uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "--port", "9000"])
        assert result.exit_code == 0
        run.assert_called_once_with(
            "trackacademia.web.api:app", host="127.0.0.1", port=9000, reload=False
        )
