# Contexto visitado (nombre lógico + URI de la petición)
from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass(frozen=True)
class Context:
    name: str
    uri: str

    def same_as(self, other: "Context") -> bool:
        # La identidad en el historial es sólo el nombre
        return self.name == other.name

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Context":
        return cls(name=data["name"], uri=data.get("uri", ""))
