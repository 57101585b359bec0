from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.api.dependencies.services import get_storage_client
from app.config.config_settings.config_schema import AppConfig, DatabaseConfig
from app.core.exceptions import RecordStoreFailureException, StorageWriteFailureException
from app.infra.db.session import DatabaseSessionManager
from app.infra.storage.storage_interface import StorageClientInterface
from app.main import create_app
from app.repo.crud.file.image_record_repo import ImageRecordRepository
from app.services.file.image_service import ImageService
from app.utils.url_builder import extract_object_name

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x01" * 2048
FIVE_MB = 5 * 1024 * 1024


def upload(client, filename="cat.png", data=PNG_BYTES, content_type="image/png", field="image"):
    return client.post("/api/upload", files={field: (filename, data, content_type)})


# 测试健康检查
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}


# ==========================
# POST /api/upload
# ==========================

def test_upload_success(client, s3_storage):
    response = upload(client)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Upload successful"
    image = body["image"]
    assert set(image) == {"id", "name", "url", "createdAt"}
    assert image["name"] == "cat.png"

    object_name = extract_object_name(image["url"])
    assert image["url"] == f"https://storage.googleapis.com/test-bucket/{object_name}"
    assert s3_storage.get_object(object_name) == (PNG_BYTES, "image/png")


def test_upload_pdf_accepted(client):
    response = upload(client, filename="report.pdf", data=b"%PDF-1.7", content_type="application/pdf")
    assert response.status_code == 201
    assert response.json()["image"]["url"].endswith(".pdf")


def test_upload_without_file(client):
    response = upload(client, field="file")
    assert response.status_code == 400
    assert response.json() == {"error": "no_file_uploaded", "message": "No file uploaded"}


def test_upload_text_plain_rejected_before_storage(app, client):
    storage = MagicMock(spec=StorageClientInterface)
    app.dependency_overrides[get_storage_client] = lambda: storage

    response = upload(client, filename="notes.txt", data=b"hello", content_type="text/plain")

    assert response.status_code == 400
    assert response.json() == {
        "error": "unsupported_file_type",
        "message": "Only image and PDF files are allowed",
    }
    assert storage.method_calls == []
    app.dependency_overrides.clear()


def test_upload_over_size_limit_rejected(client, s3_storage):
    with patch.object(s3_storage, "put_object") as put_object:
        response = upload(client, data=b"\x00" * (FIVE_MB + 1))

    assert response.status_code == 400
    assert response.json()["error"] == "file_too_large"
    put_object.assert_not_called()


def test_upload_at_size_limit_accepted(client):
    response = upload(client, data=b"\x00" * FIVE_MB)
    assert response.status_code == 201


def test_upload_storage_failure_returns_500_and_no_record(client, s3_storage):
    with patch.object(s3_storage, "put_object", side_effect=StorageWriteFailureException("boom")):
        response = upload(client)

    assert response.status_code == 500
    assert response.json() == {"error": "upload_failed", "message": "Failed to upload image"}
    assert client.get("/api/images").json() == {"images": []}


# ==========================
# GET /api/images
# ==========================

def test_list_images_newest_first(client):
    for name in ("A.png", "B.png", "C.png"):
        assert upload(client, filename=name).status_code == 201

    response = client.get("/api/images")

    assert response.status_code == 200
    assert [i["name"] for i in response.json()["images"]] == ["C.png", "B.png", "A.png"]


def test_list_images_empty(client):
    response = client.get("/api/images")
    assert response.status_code == 200
    assert response.json() == {"images": []}


# ==========================
# GET /api/images/{id}
# ==========================

def test_get_image_by_id(client):
    created = upload(client).json()["image"]

    response = client.get(f"/api/images/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"image": created}


def test_get_image_not_found(client):
    response = client.get("/api/images/999")
    assert response.status_code == 404
    assert response.json() == {"error": "image_not_found", "message": "Image not found"}


def test_id_beyond_integer_column_is_not_found(client, s3_storage):
    huge_id = "99999999999999999999"

    assert client.get(f"/api/images/{huge_id}").json() == {
        "error": "image_not_found",
        "message": "Image not found",
    }
    with patch.object(s3_storage, "remove_object") as remove_object:
        response = client.delete(f"/api/images/{huge_id}")
    assert response.status_code == 404
    remove_object.assert_not_called()
    assert client.get("/api/images/2147483648").status_code == 404


def test_get_image_invalid_id(client):
    for bad_id in ("abc", "1.5", "12abc"):
        response = client.get(f"/api/images/{bad_id}")
        assert response.status_code == 400
        assert response.json() == {"error": "invalid_image_id", "message": "Invalid image ID"}


# ==========================
# DELETE /api/images/{id}
# ==========================

def test_delete_image(client, s3_storage):
    created = upload(client).json()["image"]
    object_name = extract_object_name(created["url"])

    response = client.delete(f"/api/images/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"message": "Image deleted successfully"}
    assert client.get(f"/api/images/{created['id']}").status_code == 404
    assert s3_storage.object_exists(object_name) is False


def test_delete_unknown_image(client, s3_storage):
    with patch.object(s3_storage, "remove_object") as remove_object:
        response = client.delete("/api/images/4242")

    assert response.status_code == 404
    assert response.json()["error"] == "image_not_found"
    remove_object.assert_not_called()


def test_delete_invalid_id(client):
    response = client.delete("/api/images/not-a-number")
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_image_id"


def test_record_delete_failure_after_blob_delete(client, s3_storage):
    created = upload(client).json()["image"]
    object_name = extract_object_name(created["url"])

    with patch.object(ImageRecordRepository, "delete", side_effect=RecordStoreFailureException("db down")):
        response = client.delete(f"/api/images/{created['id']}")

    # 请求以 JSON 500 结束，记录仍可查询，对象已被删除
    assert response.status_code == 500
    assert response.json() == {"error": "delete_failed", "message": "Failed to delete image"}
    assert client.get(f"/api/images/{created['id']}").status_code == 200
    assert s3_storage.object_exists(object_name) is False


# ==========================
# 错误处理 / 配置
# ==========================

def test_unhandled_exception_returns_generic_500(app):
    with patch.object(ImageService, "get_all_images", side_effect=RuntimeError("secret details")):
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/images")

    assert response.status_code == 500
    assert response.json() == {"error": "internal_error", "message": "Internal server error"}
    assert "secret" not in response.text


def test_missing_database_url_fails_lazily(storage_config, s3_storage):
    config = AppConfig(database=DatabaseConfig(url=None), storage=storage_config)
    app = create_app(config=config, storage_client=s3_storage, db=DatabaseSessionManager(config.database))

    # 进程可以正常启动，直到第一次访问数据库才报错
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        response = client.get("/api/images")

    assert response.status_code == 500
    assert response.json()["error"] == "configuration_missing"
    assert response.json()["message"] == "DATABASE_URL environment variable is not set"


def test_unreachable_storage_endpoint_reports_upload_failure(app_config):
    app_config.storage.params.endpoint = "not a host"
    app = create_app(config=app_config, db=DatabaseSessionManager(app_config.database))

    with TestClient(app) as client:
        response = upload(client)

    assert response.status_code == 500
    assert response.json() == {"error": "upload_failed", "message": "Failed to upload image"}
