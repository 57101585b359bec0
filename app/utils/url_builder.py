# app/utils/url_builder.py

from typing import Optional
from urllib.parse import urlparse


def build_public_storage_url(
    object_name: str,
    public_base_url: str,
    bucket_name: str,
    path_style: str = "path",
) -> str:
    """
    一个“纯”工具函数，用于根据传入的上下文构建公共 URL。

    - Path 风格 (GCS 默认): https://storage.googleapis.com/my-bucket/1700000000000.png
    - Virtual 风格: 假设 public_base_url 已经是 "https://my-bucket.domain.com"
    """
    base_url = public_base_url.rstrip('/')
    key = object_name.lstrip('/')
    if path_style == "virtual":
        return f"{base_url}/{key}"
    return f"{base_url}/{bucket_name}/{key}"


def extract_object_name(url: Optional[str]) -> Optional[str]:
    """
    从公开 URL 中还原对象 key（URL 路径的最后一段）。
    无法解析出非空 key 时返回 None。
    """
    if not url:
        return None
    object_name = urlparse(url).path.split("/")[-1]
    return object_name or None
