import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv

from app.config.config_settings.config_schema import AppConfig
from app.core.logger import logger


BASE_DIR = Path(__file__).resolve().parents[3]
DEFAULT_ENV = "config"

# ${VAR} 或 ${VAR:-default}
_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"配置文件未找到: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def interpolate_env_vars(obj):
    """
    替换 YAML 中的 ${VAR} / ${VAR:-default} 为 os.environ 中的值
    并做类型转换（true/false）。
    未设置且没有默认值的变量会被替换为 None，交给使用方在首次访问时校验。
    """
    def convert(value: str):
        v = value.lower()
        if v == "true": return True
        if v == "false": return False
        return value

    def substitute(value: str):
        missing = False

        def repl(match: re.Match) -> str:
            nonlocal missing
            name, default = match.group(1), match.group(2)
            env_value = os.environ.get(name)
            if env_value not in (None, ""):
                return env_value
            if default is not None:
                return default
            missing = True
            return ""

        raw = _PLACEHOLDER.sub(repl, value)
        if missing:
            return None
        return convert(raw)

    if isinstance(obj, dict):
        return {k: interpolate_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [interpolate_env_vars(i) for i in obj]
    elif isinstance(obj, str):
        return substitute(obj)
    else:
        return obj


def _drop_nulls(obj):
    """移除值为 None 的键，让 Pydantic 模型的默认值生效。"""
    if isinstance(obj, dict):
        return {k: _drop_nulls(v) for k, v in obj.items() if v is not None}
    return obj


def get_env() -> str:
    return os.getenv("ENV", DEFAULT_ENV)


@lru_cache()
def get_app_config() -> AppConfig:
    env = get_env()
    logger.info(f"🌍 当前环境: {env}")

    # 1. 首先加载通用的 .env 文件 (如果存在)
    base_env_path = BASE_DIR / ".env"
    if base_env_path.exists():
        load_dotenv(dotenv_path=base_env_path)
        logger.info(f"✔️ 已加载通用 .env 文件: {base_env_path}")

    # 2. 然后加载特定环境的 .env 文件 (例如 .env.prod)，它会覆盖通用设置
    env_specific_path = BASE_DIR / f".env.{env}"
    if env_specific_path.exists():
        load_dotenv(dotenv_path=env_specific_path, override=True)
        logger.info(f"✔️ 已加载特定环境 .env 文件: {env_specific_path}")

    config_path = BASE_DIR / "app" / "config" / f"{env}.yaml"
    logger.info(f"🔧 加载配置文件: {config_path}")

    data = load_yaml(config_path)
    data = _drop_nulls(interpolate_env_vars(data))

    config = AppConfig(**data)
    logger.debug(f"🔧 配置加载完成: server={config.server}, storage.type={config.storage.type}")
    return config


def reload_app_config():
    get_app_config.cache_clear()
    return get_app_config()
