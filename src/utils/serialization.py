"""
Codificación JSON de las colas de historial
"""
import json
from typing import Any, Dict, List

from history.context import Context

CONTEXT_TAG = "__context__"


def encode_value(value: Any) -> Any:
    """Convierte Contexts (y listas de ellos) a estructuras JSON"""
    if isinstance(value, Context):
        return {CONTEXT_TAG: value.to_dict()}
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    if isinstance(value, dict):
        return {k: encode_value(v) for k, v in value.items()}
    return value


def decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value.keys()) == {CONTEXT_TAG}:
            return Context.from_dict(value[CONTEXT_TAG])
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(item) for item in value]
    return value


def dumps(data: Dict[str, Any]) -> str:
    return json.dumps(encode_value(data), ensure_ascii=False, indent=2)


def loads(text: str) -> Dict[str, Any]:
    """Parsea un documento de sesión; lanza json.JSONDecodeError si está corrupto"""
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("El documento de sesión debe ser un objeto JSON")
    return decode_value(data)


def contexts_to_list(contexts: List[Context]) -> List[Dict[str, Any]]:
    # Forma plana para respuestas HTTP y logs
    return [c.to_dict() for c in contexts]
