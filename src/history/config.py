"""
Configuración del historial desde .env / variables de entorno
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

ENV_TEMPLATE = """# Tamaño máximo del historial por sesión
HISTORY_MAX_SIZE=10

# Configuración de logging
LOG_LEVEL=INFO
HISTORY_LOG_FILE=logs/history.log

# Sesiones persistidas (un JSON por sesión)
HISTORY_STORE_DIR=sessions
HISTORY_COOKIE=HISTORY_SESSION_ID

# Modo debug (1 = muestra logs en consola)
HISTORY_DEBUG=0
HISTORY_PORT=8080
"""


@dataclass
class HistorySettings:
    max_size: int = 10
    log_file: str = "logs/history.log"
    log_level: str = "INFO"
    store_dir: str = "sessions"
    cookie_name: str = "HISTORY_SESSION_ID"
    debug: bool = False
    port: int = 8080


def _parse_max_size(raw: str) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"HISTORY_MAX_SIZE inválido: {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"HISTORY_MAX_SIZE debe ser positivo: {value}")
    return value


def load_settings(env_file: Optional[str] = None) -> HistorySettings:
    """Carga la configuración; el entorno real tiene prioridad sobre el .env"""
    load_dotenv(env_file)
    return HistorySettings(
        max_size=_parse_max_size(os.getenv("HISTORY_MAX_SIZE", "10")),
        log_file=os.getenv("HISTORY_LOG_FILE", "logs/history.log"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        store_dir=os.getenv("HISTORY_STORE_DIR", "sessions"),
        cookie_name=os.getenv("HISTORY_COOKIE", "HISTORY_SESSION_ID"),
        debug=os.getenv("HISTORY_DEBUG", "0") == "1",
        port=int(os.getenv("HISTORY_PORT", "8080")),
    )


def write_env_template(path: str = ".env") -> bool:
    """Crea el .env con los valores por defecto si no existe"""
    env_path = Path(path)
    if env_path.exists():
        return False
    env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
    return True
