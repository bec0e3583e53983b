"""
Historial de navegación acotado y sin duplicados, guardado en la sesión
"""
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .context import Context
from .errors import InvalidArgumentError, InvalidOperationError
from .logging_history import HistoryLogger
from .session import SessionStore

READ_ONLY_METHOD = "GET"


class RequestDescriptor(Protocol):
    def method(self) -> str: ...

    def uri(self) -> str: ...


@dataclass(frozen=True)
class SimpleRequest:
    """Petición mínima (método + URI) para CLI y tests"""
    request_method: str = "GET"
    request_uri: str = ""

    def method(self) -> str:
        return self.request_method

    def uri(self) -> str:
        return self.request_uri


class Browser:
    """
    Registra los contextos visitados por el usuario, del más nuevo al más viejo.

    La cola vive en la sesión bajo HISTORY_SESSION_VARIABLE y nunca se cachea:
    cada acceso la relee. Al construirse, la instancia la recorta si supera el
    max_size actual; max_size no se persiste, así que dos instancias sobre la
    misma sesión pueden usar límites distintos.
    """

    HISTORY_SESSION_VARIABLE = "HISTORY_SESSION_VARIABLE"

    def __init__(self, request: RequestDescriptor, session: SessionStore, max_size: int,
                 logger: HistoryLogger = None, session_id: str = "-"):
        if isinstance(max_size, bool) or not isinstance(max_size, int) or max_size <= 0:
            raise InvalidArgumentError(f"max_size debe ser un entero positivo: {max_size!r}")

        self.request = request
        self.session = session
        self.max_size = max_size
        self.logger = logger or HistoryLogger(log_file=None)
        self.session_id = session_id

        if not self.session.has(self.HISTORY_SESSION_VARIABLE):
            self.session.set(self.HISTORY_SESSION_VARIABLE, [])
            self.logger.log_initialized(self.session_id)

        history = self._load()
        if len(history) > self.max_size:
            self.session.set(self.HISTORY_SESSION_VARIABLE, history[:self.max_size])
            self.logger.log_truncated(self.session_id, len(history), self.max_size)

    def _load(self) -> List[Context]:
        return list(self.session.get(self.HISTORY_SESSION_VARIABLE) or [])

    def keep_current_context(self, name: str):
        """Guarda la petición actual como contexto `name` (sólo peticiones GET)"""
        if self.request.method() != READ_ONLY_METHOD:
            raise InvalidOperationError(
                f"Sólo se guardan contextos de peticiones {READ_ONLY_METHOD} "
                f"(recibido: {self.request.method()})"
            )
        if not name:
            raise InvalidArgumentError("El nombre del contexto no puede estar vacío")

        context = Context(name=name, uri=self.request.uri())
        history = self._load()

        for position, kept in enumerate(history):
            if kept.same_as(context):
                del history[position]
                self.logger.log_moved(self.session_id, name, position)
                break

        history.insert(0, context)

        while len(history) > self.max_size:
            evicted = history.pop()
            self.logger.log_evicted(self.session_id, evicted.name, evicted.uri)

        self.session.set(self.HISTORY_SESSION_VARIABLE, history)
        self.logger.log_kept(self.session_id, context.name, context.uri, len(history))

    def get_context_history(self) -> List[Context]:
        # Otra instancia con un límite mayor pudo haber escrito más entradas
        return self._load()[:self.max_size]

    def get_last_context(self) -> Optional[Context]:
        history = self._load()
        return history[0] if history else None
