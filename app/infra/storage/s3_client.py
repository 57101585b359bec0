from functools import cached_property
from typing import Dict, List, Optional, Tuple

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.config.config_loader import load_config_file
from app.config.config_settings.config_schema import StorageClientConfig
from app.core.exceptions import (
    BlobNotFoundException,
    ConfigurationMissingException,
    StorageDeleteFailureException,
    StorageReadFailureException,
    StorageWriteFailureException,
)
from app.core.logger import logger
from app.infra.storage.storage_interface import StorageClientInterface
from app.utils.url_builder import build_public_storage_url

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}
# botocore 在构造客户端时对非法 endpoint 抛出 ValueError
_TRANSPORT_ERRORS = (BotoCoreError, ValueError)


def _error_code(e: ClientError) -> str:
    return str(e.response.get("Error", {}).get("Code", "Unknown"))


class S3CompatibleClient(StorageClientInterface):
    """
    基于 boto3 的 S3 兼容存储客户端。

    默认配置指向 Google Cloud Storage 的互操作端点 (storage.googleapis.com)，
    同样适用于 AWS S3 与 MinIO。底层 boto3 客户端在首次访问时才创建，
    缺少 bucket 名称时在那一刻抛出 ConfigurationMissingException。
    """

    def __init__(self, config: StorageClientConfig):
        self.s3_conf = config.params
        self.capabilities = self.s3_conf.capabilities
        self.endpoint_url = self._get_base_url()

    def _get_base_url(self) -> Optional[str]:
        # endpoint 为 None 时 (AWS S3) 交给 boto3 按 region 推导
        if not self.s3_conf.endpoint:
            return None
        protocol = "https" if self.s3_conf.secure else "http"
        return f"{protocol}://{self.s3_conf.endpoint}"

    @property
    def bucket_name(self) -> str:
        if not self.s3_conf.bucket_name:
            raise ConfigurationMissingException(
                "GCS_BUCKET_NAME", "GCS_BUCKET_NAME environment variable is not set"
            )
        return self.s3_conf.bucket_name

    def _resolve_credentials(self) -> Tuple[Optional[str], Optional[str]]:
        """
        凭据优先级: 直接配置的 access_key/secret_key > credentials_file > boto3 默认凭据链。
        """
        if self.s3_conf.access_key and self.s3_conf.secret_key:
            return self.s3_conf.access_key, self.s3_conf.secret_key

        if self.s3_conf.credentials_file:
            data = load_config_file(self.s3_conf.credentials_file)
            # INI 文件按 section 分组，取第一个包含 access_key 的 section
            candidates = [data] + [v for v in data.values() if isinstance(v, dict)]
            for candidate in candidates:
                if candidate.get("access_key") and candidate.get("secret_key"):
                    return candidate["access_key"], candidate["secret_key"]
            raise ConfigurationMissingException(
                "GCS_HMAC_CREDENTIALS_FILE",
                f"Credentials file '{self.s3_conf.credentials_file}' does not contain access_key/secret_key",
            )

        return None, None

    def _add_project_header(self, request, **kwargs):
        request.headers["x-goog-project-id"] = self.s3_conf.project_id

    @cached_property
    def s3(self):
        """首次访问时创建 boto3 客户端；失败不会被缓存，下次访问会重新校验。"""
        bucket_name = self.bucket_name
        access_key, secret_key = self._resolve_credentials()

        addressing_style = self.capabilities.path_style
        if addressing_style == 'auto':
            addressing_style = None  # Boto3 的 'auto' 对应的是 None

        signature_version_map = {"v4": "s3v4", "v2": "s3"}
        signature_version = signature_version_map.get(self.capabilities.signature_version, "s3v4")

        client_config = BotoConfig(
            signature_version=signature_version,
            s3={'addressing_style': addressing_style},
            connect_timeout=self.s3_conf.connect_timeout,
            read_timeout=self.s3_conf.read_timeout,
            # 每个外部调用只尝试一次
            retries={"total_max_attempts": 1, "mode": "standard"},
        )

        client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            config=client_config,
            region_name=self.s3_conf.region,
        )

        if self.s3_conf.project_id:
            client.meta.events.register("before-sign.s3", self._add_project_header)

        logger.info(
            f"[S3 Driver] Client initialized for bucket '{bucket_name}' "
            f"(endpoint={self.endpoint_url or 'aws-default'}, region={self.s3_conf.region})"
        )
        return client

    def build_final_url(self, object_name: str) -> str:
        return build_public_storage_url(
            object_name=object_name,
            public_base_url=self.s3_conf.public_base_url,
            bucket_name=self.bucket_name,
            path_style=self.capabilities.path_style,
        )

    def put_object(self, object_name: str, data: bytes, content_type: str) -> None:
        logger.info(f"[S3 Driver] Putting object: {object_name} ({len(data)} bytes, {content_type})")
        try:
            s3 = self.s3
            s3.put_object(
                Bucket=self.bucket_name,
                Key=object_name,
                Body=data,
                ContentType=content_type,
                CacheControl=self.s3_conf.cache_control,
            )
        except (ClientError, *_TRANSPORT_ERRORS) as e:
            logger.error(f"[S3 Driver] Failed to put object {object_name}: {e}")
            raise StorageWriteFailureException(f"Failed to write object '{object_name}' to storage.") from e
        logger.info(f"[S3 Driver] Upload for {object_name} complete.")

    def remove_object(self, object_name: str) -> None:
        logger.info(f"[S3 Driver] Removing object: {object_name}")
        try:
            s3 = self.s3
            s3.delete_object(Bucket=self.bucket_name, Key=object_name)
        except ClientError as e:
            code = _error_code(e)
            logger.error(f"[S3 Driver] Failed to remove object {object_name} (ErrorCode={code}): {e}")
            if code in _NOT_FOUND_CODES:
                raise StorageDeleteFailureException(f"Object '{object_name}' does not exist.") from e
            raise StorageDeleteFailureException(f"Failed to delete object '{object_name}' from storage.") from e
        except _TRANSPORT_ERRORS as e:
            logger.error(f"[S3 Driver] Failed to remove object {object_name}: {e}")
            raise StorageDeleteFailureException(f"Failed to delete object '{object_name}' from storage.") from e

    def get_object(self, object_name: str) -> Tuple[bytes, str]:
        try:
            s3 = self.s3
            response = s3.get_object(Bucket=self.bucket_name, Key=object_name)
            body = response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise BlobNotFoundException(f"Object '{object_name}' not found.") from e
            logger.error(f"[S3 Driver] Failed to get object {object_name}: {e}")
            raise StorageReadFailureException(f"Failed to read object '{object_name}'.") from e
        except _TRANSPORT_ERRORS as e:
            logger.error(f"[S3 Driver] Failed to get object {object_name}: {e}")
            raise StorageReadFailureException(f"Failed to read object '{object_name}'.") from e
        return body, response.get("ContentType", "application/octet-stream")

    def object_exists(self, object_name: str) -> bool:
        try:
            s3 = self.s3
            s3.head_object(Bucket=self.bucket_name, Key=object_name)
            return True
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return False
            logger.error(f"[S3 Driver] Failed to stat object {object_name}: {e}")
            raise StorageReadFailureException(f"Failed to stat object '{object_name}'.") from e
        except _TRANSPORT_ERRORS as e:
            logger.error(f"[S3 Driver] Failed to stat object {object_name}: {e}")
            raise StorageReadFailureException(f"Failed to stat object '{object_name}'.") from e

    def list_objects(self, prefix: str = "") -> List[Dict]:
        """
        列出存储桶中的对象。
        :param prefix: 对象前缀，用于过滤。
        :return: 对象信息列表。
        """
        try:
            s3 = self.s3
            paginator = s3.get_paginator('list_objects_v2')
            pages = paginator.paginate(Bucket=self.bucket_name, Prefix=prefix)

            object_list = []
            for page in pages:
                for obj in page.get("Contents", []):
                    object_list.append({
                        "key": obj["Key"],
                        "size": obj["Size"],
                        "last_modified": obj["LastModified"],
                    })
        except (ClientError, *_TRANSPORT_ERRORS) as e:
            logger.error(f"[S3 Driver] Error listing objects with prefix '{prefix}': {e}")
            raise StorageReadFailureException(f"Failed to list objects with prefix '{prefix}'.") from e

        logger.info(f"[S3 Driver] Listed {len(object_list)} objects with prefix '{prefix}'.")
        return object_list
