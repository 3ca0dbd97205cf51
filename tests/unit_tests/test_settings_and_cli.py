import importlib

import pydantic
import pytest
from click.testing import CliRunner

from download_server.auth import SharedSecretVerifier
from download_server.cli import cli
from download_server.settings import Settings, get_settings


@pytest.fixture
def env_settings(monkeypatch, tmp_path):
    """Point the cached settings at a local store under tmp_path."""
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("ADMIN_SECRET", "s3cret")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_token")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.files_document == "files.json"
    assert settings.categories_document == "categories.json"
    assert settings.github_api_url == "https://api.github.com"


def test_settings_normalization():
    settings = Settings(storage_backend="LOCAL", log_level="debug", cors_origins="http://a, http://b")
    assert settings.storage_backend == "local"
    assert settings.log_level == "DEBUG"
    assert settings.cors_origin_list == ["http://a", "http://b"]


def test_invalid_storage_backend():
    with pytest.raises(pydantic.ValidationError):
        Settings(storage_backend="s3")


def test_settings_from_environment(env_settings):
    assert env_settings.admin_secret == "s3cret"
    assert env_settings.storage_backend == "local"
    assert not env_settings.uses_default_admin_secret


def test_shared_secret_verifier():
    verifier = SharedSecretVerifier("s3cret")
    assert verifier.verify("s3cret")
    assert not verifier.verify("S3CRET")
    assert not verifier.verify("s3cret ")
    assert not verifier.verify("")

    with pytest.raises(ValueError):
        SharedSecretVerifier("")


def test_show_config_masks_secrets(env_settings):
    result = CliRunner().invoke(cli, ["show-config"])
    assert result.exit_code == 0
    assert "storage_backend: local" in result.output
    assert "s3cret" not in result.output
    assert "ghp_token" not in result.output
    assert "admin_secret: ****" in result.output


def test_check_store_reports_counts(env_settings, tmp_path):
    (tmp_path / "files.json").write_text('[{"id": "1"}, {"id": "2"}]')

    result = CliRunner().invoke(cli, ["check-store"])
    assert result.exit_code == 0
    assert "files: 2 records" in result.output
    assert "categories: 0 records (categories.json @ not created yet)" in result.output


def test_check_store_reports_bad_configuration(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "github")
    monkeypatch.setenv("GITHUB_OWNER", "")
    monkeypatch.setenv("GITHUB_REPO", "")
    get_settings.cache_clear()
    try:
        result = CliRunner().invoke(cli, ["check-store"])
    finally:
        get_settings.cache_clear()
    assert result.exit_code != 0
    assert "GITHUB_OWNER and GITHUB_REPO must be set" in result.output


def test_lambda_handler_wraps_app(env_settings):
    from mangum import Mangum

    module = importlib.import_module("download_server.lambda_handler")
    module = importlib.reload(module)
    assert isinstance(module.handler, Mangum)
    assert module.app.state.settings.storage_backend == "local"
