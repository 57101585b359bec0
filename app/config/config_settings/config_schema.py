from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class StorageCapabilities(BaseModel):
    """
    描述对象存储服务的特性与能力集。
    默认值代表 Google Cloud Storage 的 S3 互操作 (XML API) 端点。
    """

    signature_version: Literal["v2", "v4"] = Field(
        default="v4",
        description="支持的签名算法版本 (v4 是现代标准, GCS 互操作同样支持)"
    )

    path_style: Literal["auto", "path", "virtual"] = Field(
        default="path",
        description="寻址风格 (GCS 公网地址为 path 风格: storage.googleapis.com/<bucket>/<key>)"
    )


class StorageParams(BaseModel):
    """
    S3 兼容对象存储的客户端参数 (GCS 互操作 / AWS S3 / MinIO)。
    除 bucket_name 外，所有字段都有默认值；缺失的必填项在首次访问存储时才报错。
    """

    # --- 核心连接配置 ---

    endpoint: Optional[str] = "storage.googleapis.com"
    """
    服务地址 (不含 http/https)。
    - GCS 互操作: 'storage.googleapis.com'
    - AWS S3: 留空 (None)，Boto3 会根据 region 自动生成。
    """

    region: str = "auto"
    """S3 区域。GCS 互操作使用 'auto'。"""

    bucket_name: Optional[str] = None
    project_id: Optional[str] = None
    """GCS 项目 ID，配置后会作为 x-goog-project-id 请求头发送。"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None

    credentials_file: Optional[str] = None
    """
    凭据文件路径 (JSON/YAML/INI)，需包含 access_key 与 secret_key。
    仅当 access_key/secret_key 未直接配置时使用。
    """

    secure: bool = True

    # --- 公网访问配置 ---

    public_base_url: str = "https://storage.googleapis.com"
    """对外公开的访问根地址，最终 URL 为 {public_base_url}/{bucket}/{key}。"""

    cache_control: str = "public, max-age=31536000"
    """上传对象时附带的缓存指令 (默认一年)。"""

    # --- (可选) 健壮性配置 ---

    connect_timeout: int = 60
    """连接超时时间 (秒)"""

    read_timeout: int = 60
    """读取超时时间 (秒)"""

    capabilities: StorageCapabilities = Field(
        default_factory=StorageCapabilities,
        description="描述当前存储服务的特性与行为差异"
    )


class StorageClientConfig(BaseModel):
    type: Literal['gcs', 's3', 'minio'] = 'gcs'
    params: StorageParams = Field(default_factory=StorageParams)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "info"
    api_prefix: str = "/api"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class DatabaseConfig(BaseModel):
    url: Optional[str] = None
    echo: bool = False
    auto_create_tables: bool = True


class LoggingConfig(BaseModel):
    level: str = "INFO"
    enable_file: bool = False
    log_dir: str = "logs"
    rotation: str = "1 week"
    retention: str = "1 month"


class UploadConfig(BaseModel):
    """上传校验规则。"""
    max_file_size_mb: int = Field(5, description="允许的最大文件大小 (MB)")
    allowed_type_prefixes: List[str] = Field(
        default_factory=lambda: ["image/", "application/pdf"],
        description="允许的 MIME 类型前缀, e.g., 'image/' 匹配所有图片类型"
    )

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


# ========================================================================================
#
#   所有配置模型都要写在APPconfig上方
#
# ========================================================================================
class AppConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageClientConfig = Field(default_factory=StorageClientConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
