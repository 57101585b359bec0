import pytest

from app.config.config_loader import load_config_file
from app.config.config_settings import config_manager
from app.config.config_settings.config_manager import interpolate_env_vars, reload_app_config
from app.config.config_settings.config_schema import AppConfig, UploadConfig


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "ENV", "GCS_BUCKET_NAME", "GOOGLE_CLOUD_PROJECT", "GCS_HMAC_CREDENTIALS_FILE",
        "GCS_HMAC_ACCESS_KEY", "GCS_HMAC_SECRET", "DATABASE_URL", "PORT", "LOG_LEVEL",
        "LOG_ENABLE_FILE", "LOG_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    config_manager.get_app_config.cache_clear()


def test_interpolation(monkeypatch):
    monkeypatch.setenv("BUCKET", "photos")
    monkeypatch.setenv("FLAG", "TRUE")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    data = {
        "bucket": "${BUCKET}",
        "missing": "${UNSET_VAR}",
        "fallback": "${UNSET_VAR:-5000}",
        "flag": "${FLAG}",
        "off": "${UNSET_VAR:-false}",
        "url": "https://${BUCKET}.example.com",
        "nested": [{"value": "${BUCKET}"}, 3],
    }

    assert interpolate_env_vars(data) == {
        "bucket": "photos",
        "missing": None,
        "fallback": "5000",
        "flag": True,
        "off": False,
        "url": "https://photos.example.com",
        "nested": [{"value": "photos"}, 3],
    }


def test_load_app_config_without_environment(clean_env):
    config = reload_app_config()

    # 必填项缺失时仍能加载，错误推迟到首次使用
    assert config.storage.type == "gcs"
    assert config.storage.params.bucket_name is None
    assert config.storage.params.endpoint == "storage.googleapis.com"
    assert config.database.url is None
    assert config.server.port == 5000
    assert config.server.api_prefix == "/api"
    assert config.logging.enable_file is False
    assert config.upload.max_file_size_bytes == 5 * 1024 * 1024


def test_load_app_config_from_environment(clean_env):
    clean_env.setenv("GCS_BUCKET_NAME", "my-bucket")
    clean_env.setenv("GOOGLE_CLOUD_PROJECT", "my-project")
    clean_env.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/images")
    clean_env.setenv("PORT", "8080")

    config = reload_app_config()

    assert config.storage.params.bucket_name == "my-bucket"
    assert config.storage.params.project_id == "my-project"
    assert config.database.url == "postgresql+asyncpg://u:p@db:5432/images"
    assert config.server.port == 8080


def test_app_config_defaults():
    config = AppConfig()
    assert config.storage.params.public_base_url == "https://storage.googleapis.com"
    assert config.storage.params.cache_control == "public, max-age=31536000"
    assert UploadConfig().allowed_type_prefixes == ["image/", "application/pdf"]


def test_load_config_file_formats(tmp_path):
    (tmp_path / "a.json").write_text('{"x": 1}', encoding="utf-8")
    (tmp_path / "b.yml").write_text("x: 2\n", encoding="utf-8")
    (tmp_path / "c.ini").write_text("[s]\nx = 3\n", encoding="utf-8")
    (tmp_path / "d.toml").write_text("x = 4\n", encoding="utf-8")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    assert load_config_file(str(tmp_path / "a.json")) == {"x": 1}
    assert load_config_file(str(tmp_path / "b.yml")) == {"x": 2}
    assert load_config_file(str(tmp_path / "c.ini")) == {"s": {"x": "3"}}
    assert load_config_file(str(tmp_path / "d.toml")) == {}
    assert load_config_file(str(tmp_path / "broken.json")) == {}
    assert load_config_file(str(tmp_path / "missing.json")) == {}


def test_service_account_credentials_are_not_read_as_hmac_file(clean_env, tmp_path):
    service_account = tmp_path / "sa.json"
    service_account.write_text('{"client_email": "svc@p.iam.gserviceaccount.com", "private_key": "k"}')
    clean_env.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(service_account))

    assert reload_app_config().storage.params.credentials_file is None

    clean_env.setenv("GCS_HMAC_CREDENTIALS_FILE", "/secrets/hmac.json")
    assert reload_app_config().storage.params.credentials_file == "/secrets/hmac.json"
