"""
Almacenes de sesión por usuario (contrato has/get/set)
"""
import re
import threading
from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Protocol
from uuid import uuid4

from utils import serialization

from .errors import SessionStoreError

SESSION_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class SessionStore(Protocol):
    def has(self, key: str) -> bool: ...

    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


class MemorySessionStore:
    """Sesión en memoria; vive lo que viva el proceso"""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    def has(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any):
        self._data[key] = value

    def __len__(self):
        return len(self._data)


class FileSessionStore:
    """
    Sesión persistida como un documento JSON.

    Cada set() reescribe el archivo de inmediato. Un archivo inexistente es
    una sesión vacía; uno corrupto lanza SessionStoreError.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return serialization.loads(f.read())
        except (ValueError, KeyError, TypeError) as e:
            raise SessionStoreError(f"Sesión ilegible en {self.path}: {e}", str(self.path)) from e

    def has(self, key: str) -> bool:
        return key in self._load()

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def __len__(self):
        return len(self._load())

    def set(self, key: str, value: Any):
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            f.write(serialization.dumps(data))
        tmp.replace(self.path)


def file_store_factory(directory: Path) -> Callable[[str], FileSessionStore]:
    directory = Path(directory)

    def factory(key: str) -> FileSessionStore:
        return FileSessionStore(directory / f"{key}.json")

    return factory


def memory_store_factory(key: str) -> MemorySessionStore:
    return MemorySessionStore()


class SessionRegistry:
    """Sesiones vivas indexadas por id, con tope LRU"""

    def __init__(self, factory: Callable[[str], Any] = memory_store_factory, size: int = 2000):
        self.factory = factory
        self.size = size
        self.cache: "OrderedDict[str, Any]" = OrderedDict()
        self.lock = threading.Lock()

    def get_or_create(self, key: Optional[str] = None) -> Tuple[str, Any]:
        """
        Devuelve (id, sesión). Un id sólo se reutiliza si la sesión sigue viva
        en el registro o tiene datos persistidos; si no, se emite uno nuevo.
        """
        # Ids fuera de formato se descartan (también terminan en nombres de archivo)
        if not key or not SESSION_ID_RE.match(key):
            key = None
        with self.lock:
            if key is not None:
                session = self.cache.get(key)
                if session is not None:
                    self.cache.move_to_end(key)
                    return key, session
                session = self.factory(key)
                if len(session) == 0:
                    key = None
            if key is None:
                key = uuid4().hex
                session = self.factory(key)
            self.cache[key] = session
            while len(self.cache) > self.size:
                self.cache.popitem(last=False)
            return key, session

    def __contains__(self, key: str) -> bool:
        with self.lock:
            return key in self.cache

    def __len__(self):
        return len(self.cache)
