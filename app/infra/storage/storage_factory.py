from app.config.config_settings.config_schema import StorageClientConfig
from app.core.logger import logger
from app.infra.storage.s3_client import S3CompatibleClient
from app.infra.storage.storage_interface import StorageClientInterface


def create_storage_client(config: StorageClientConfig) -> StorageClientInterface:
    """
    根据配置中的 type 创建存储客户端实例。

    gcs / s3 / minio 都走 S3 兼容协议，差异全部体现在 params 里
    (endpoint、region、寻址风格)。这里只构造对象，不做任何网络访问，
    bucket 等必填项在首次使用时才校验。
    """
    if config.type in ("gcs", "s3", "minio"):
        logger.debug(f"Creating storage client of type '{config.type}'...")
        return S3CompatibleClient(config=config)

    # 这是一个保障，理论上 Pydantic 的 Literal 会阻止未知类型
    raise ValueError(f"Unsupported storage client type: '{config.type}'.")
