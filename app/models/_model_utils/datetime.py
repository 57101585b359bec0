from datetime import datetime, timezone


def utcnow() -> datetime:
    """带时区信息的当前 UTC 时间。"""
    return datetime.now(timezone.utc)
