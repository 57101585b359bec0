import os
import re
import time
from typing import Callable, Optional


# 只保留字母数字扩展名，避免 key 中出现 ?、#、空格等 URL 特殊字符
_SAFE_EXTENSION = re.compile(r"\.[a-z0-9]+")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class ObjectKeyGenerator:
    """
    生成对象 key: <毫秒时间戳><原始扩展名>, e.g. '1718000000000.png'。

    同一进程内时间戳严格递增：时钟没有越过上一次发出的值时取上一次的值 + 1，
    所以同进程的两次上传不会生成相同的 key。
    跨进程在同一毫秒内、扩展名相同的上传仍可能冲突 (已知弱点)。
    生成过程没有 await 点，在事件循环线程内调用是原子的。
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _now_ms
        self._last_token = 0

    def next_token(self) -> int:
        token = self._clock()
        if token <= self._last_token:
            token = self._last_token + 1
        self._last_token = token
        return token

    def generate(self, original_filename: Optional[str]) -> str:
        ext = os.path.splitext(original_filename or "")[-1].lower()
        if not _SAFE_EXTENSION.fullmatch(ext):
            ext = ""
        return f"{self.next_token()}{ext}"


default_key_generator = ObjectKeyGenerator()
