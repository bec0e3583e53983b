"""
Excepciones del historial de navegación
"""


class HistoryError(Exception):
    """Error base del componente de historial"""
    pass


class ValidationError(HistoryError):
    """Uso incorrecto detectado antes de tocar la sesión"""
    pass


class InvalidOperationError(ValidationError):
    pass


class InvalidArgumentError(ValidationError):
    pass


class SessionStoreError(HistoryError):
    """La sesión persistida no se puede leer"""

    def __init__(self, message: str, path: str = None):
        HistoryError.__init__(self, message)
        self.path = path


class ConfigError(HistoryError):
    pass
