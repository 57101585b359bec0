# app/models/__init__.py

# === 文件模块 ===
from app.models.files.image_record import ImageRecord

__all__ = ["ImageRecord"]
