"""
Sistema de logging para eventos del historial de navegación
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional
from pathlib import Path

LOG_PREFIX = "HISTORY: "


class HistoryLogger:
    """Logger especializado para los cambios del historial"""

    def __init__(self, log_file: Optional[str] = "logs/history.log", level: str = "INFO",
                 console: bool = True, name: Optional[str] = None):
        self.log_file = log_file

        if log_file is None:
            # Sin archivo: logger del módulo, sin handlers propios
            self.logger = logging.getLogger(name or __name__)
            return

        # Crear directorio de logs si no existe
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        resolved = os.path.abspath(log_file)

        # Un logger por archivo: dos instancias con archivos distintos no se pisan
        self.logger = logging.getLogger(name or f"history_logger:{resolved}")
        self.logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
        self.logger.propagate = False

        for handler in list(self.logger.handlers):
            if isinstance(handler, logging.FileHandler) and handler.baseFilename != resolved:
                self.logger.removeHandler(handler)
                handler.close()

        # Evitar duplicados
        if not any(isinstance(h, logging.FileHandler) for h in self.logger.handlers):
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(levelname)s - %(message)s'
            ))
            self.logger.addHandler(file_handler)

        has_console = any(type(h) is logging.StreamHandler for h in self.logger.handlers)
        if console and not has_console:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(
                '%(levelname)s - %(message)s'
            ))
            self.logger.addHandler(console_handler)

    def log_event(self, session_id: str, event_type: str, data: Any):
        """Registra un evento del historial"""
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "session": session_id,
            "type": event_type,
            "data": self._sanitize_data(data)
        }

        self.logger.info(f"{LOG_PREFIX}{json.dumps(log_entry, ensure_ascii=False, indent=None)}")

    def log_initialized(self, session_id: str):
        self.log_event(session_id, "HISTORY_INITIALIZED", {})

    def log_truncated(self, session_id: str, previous: int, max_size: int):
        self.log_event(session_id, "HISTORY_TRUNCATED", {
            "previous_size": previous,
            "max_size": max_size
        })

    def log_kept(self, session_id: str, name: str, uri: str, size: int):
        self.log_event(session_id, "CONTEXT_KEPT", {
            "name": name,
            "uri": uri,
            "size": size
        })

    def log_moved(self, session_id: str, name: str, previous_position: int):
        self.log_event(session_id, "CONTEXT_MOVED", {
            "name": name,
            "previous_position": previous_position
        })

    def log_evicted(self, session_id: str, name: str, uri: str):
        self.log_event(session_id, "CONTEXT_EVICTED", {
            "name": name,
            "uri": uri
        })

    def _sanitize_data(self, data: Any) -> Any:
        """Sanitiza datos para logging (trunca si es muy largo)"""
        if isinstance(data, str) and len(data) > 1000:
            return data[:1000] + "... [truncated]"
        elif isinstance(data, dict):
            return {k: self._sanitize_data(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._sanitize_data(item) for item in data[:10]]  # Max 10 items
        return data

    def get_logs(self, session_id: str = None, event_type: str = None,
                 limit: int = 50) -> list:
        """Obtiene logs filtrados"""
        logs = []

        if not self.log_file or not os.path.exists(self.log_file):
            return logs

        for handler in self.logger.handlers:
            handler.flush()

        with open(self.log_file, 'r', encoding='utf-8') as f:
            for line in f:
                if LOG_PREFIX not in line:
                    continue
                try:
                    json_part = line.split(LOG_PREFIX, 1)[1].strip()
                    log_entry = json.loads(json_part)
                except (json.JSONDecodeError, IndexError):
                    continue

                if session_id and log_entry.get("session") != session_id:
                    continue
                if event_type and log_entry.get("type") != event_type:
                    continue

                logs.append(log_entry)

        # Retornar los más recientes
        return logs[-limit:] if logs else []

    def show_logs_summary(self):
        """Muestra un resumen de los logs"""
        logs = self.get_logs(limit=100)

        if not logs:
            print("No hay eventos de historial registrados")
            return

        sessions = set(log.get("session") for log in logs)
        types: Dict[str, int] = {}

        for log in logs:
            log_type = log.get("type", "UNKNOWN")
            types[log_type] = types.get(log_type, 0) + 1

        print("\nRESUMEN DE HISTORIAL")
        print("=" * 40)
        print(f"Total de eventos: {len(logs)}")
        print(f"Sesiones: {len(sessions)}")
        print("\nTipos de eventos:")
        for log_type, count in sorted(types.items()):
            print(f"  {log_type}: {count}")

        print(f"\nArchivo completo: {self.log_file}")

    def clear_logs(self):
        """Limpia los logs"""
        if not self.log_file:
            return
        for handler in self.logger.handlers:
            handler.flush()
            if isinstance(handler, logging.FileHandler):
                handler.close()
        if os.path.exists(self.log_file):
            os.remove(self.log_file)
        print("Logs de historial limpiados")
