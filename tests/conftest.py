import boto3
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from loguru import logger
from moto import mock_aws
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from app.config.config_settings.config_schema import (
    AppConfig,
    DatabaseConfig,
    StorageClientConfig,
    StorageParams,
)
from app.infra.db.session import DatabaseSessionManager
from app.infra.storage.s3_client import S3CompatibleClient
from app.main import create_app
from app.repo.crud.file.image_record_repo import ImageRecordRepository
from app.services.file.image_service import ImageService

TEST_BUCKET = "test-bucket"
TEST_REGION = "us-east-1"
SQLITE_URL = "sqlite+aiosqlite://"


def make_engine():
    # 内存数据库: 所有会话共享同一个连接，否则每个连接都是一个空库
    return create_async_engine(
        SQLITE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """避免测试意外访问真实云账号。"""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)


@pytest.fixture
def storage_config():
    return StorageClientConfig(
        type="s3",
        params=StorageParams(
            endpoint=None,
            region=TEST_REGION,
            bucket_name=TEST_BUCKET,
            access_key="testing",
            secret_key="testing",
        ),
    )


@pytest.fixture
def s3_storage(storage_config):
    """moto 模拟的 S3 兼容存储，bucket 已创建。"""
    with mock_aws():
        boto3.client("s3", region_name=TEST_REGION).create_bucket(Bucket=TEST_BUCKET)
        yield S3CompatibleClient(storage_config)


@pytest_asyncio.fixture
async def db_manager():
    manager = DatabaseSessionManager(DatabaseConfig(url=SQLITE_URL), engine=make_engine())
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def session(db_manager):
    async with db_manager.session() as session:
        yield session


@pytest.fixture
def image_repo(session):
    return ImageRecordRepository(session)


@pytest.fixture
def image_service(s3_storage, image_repo):
    return ImageService(storage=s3_storage, image_repo=image_repo)


@pytest.fixture
def log_messages():
    """收集 WARNING 及以上的 loguru 日志文本。"""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


# --- HTTP 层 ---

@pytest.fixture
def app_config(storage_config):
    return AppConfig(database=DatabaseConfig(url=SQLITE_URL), storage=storage_config)


@pytest.fixture
def app(app_config, s3_storage):
    db = DatabaseSessionManager(app_config.database, engine=make_engine())
    return create_app(config=app_config, storage_client=s3_storage, db=db)


@pytest.fixture
def client(app):
    # 进入上下文才会执行 lifespan (建表 / 释放引擎)
    with TestClient(app) as client:
        yield client
