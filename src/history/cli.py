"""
Consola interactiva para simular peticiones sobre una sesión persistida
"""
import argparse
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from .browser import Browser, SimpleRequest
from .config import HistorySettings, load_settings, write_env_template
from .errors import HistoryError, ValidationError
from .logging_history import HistoryLogger
from .session import FileSessionStore

HELP_TEXT = """
📚 COMANDOS DISPONIBLES:
   visit <URI> <NOMBRE>  - Petición GET que guarda el contexto
   post <URI> <NOMBRE>   - Petición POST (no se permite guardar)
   history               - Muestra el historial
   last                  - Muestra el último contexto
   size <N>              - Cambia el tamaño máximo para las siguientes peticiones
   logs                  - Resumen de eventos registrados
   help                  - Muestra esta ayuda
   quit                  - Salir
"""


class HistoryConsole:
    """Sesión de consola: cada comando equivale a una petición nueva"""

    def __init__(self, settings: HistorySettings, session_name: str = "console"):
        self.settings = settings
        self.max_size = settings.max_size
        self.session_id = session_name
        self.session = FileSessionStore(Path(settings.store_dir) / f"{session_name}.json")
        self.logger = HistoryLogger(settings.log_file, settings.log_level, console=settings.debug)

    def _browser(self, method: str = "GET", uri: str = "", max_size: int = None) -> Browser:
        return Browser(SimpleRequest(method, uri), self.session, max_size if max_size is not None else self.max_size,
                       logger=self.logger, session_id=self.session_id)

    def keep(self, method: str, uri: str, name: str):
        self._browser(method, uri).keep_current_context(name)

    def show_history(self):
        history = self._browser().get_context_history()
        if not history:
            print("📝 No hay historial de navegación")
            return

        print("\n📝 HISTORIAL DE NAVEGACIÓN:")
        print("=" * 50)
        for i, context in enumerate(history, 1):
            print(f"{i}. [{context.name}]: {context.uri}")
        print()

    def show_last(self):
        last = self._browser().get_last_context()
        if last is None:
            print("📝 No hay contextos guardados")
        else:
            print(f"Último contexto: [{last.name}] {last.uri}")

    def set_size(self, raw: str):
        size = int(raw)
        # Se valida construyendo un Browser, que además recorta la sesión
        self._browser(max_size=size)
        self.max_size = size

    def handle(self, user_input: str) -> bool:
        """Procesa un comando; devuelve False para salir"""
        tokens = shlex.split(user_input)
        if not tokens:
            return True

        cmd, args = tokens[0].lower(), tokens[1:]

        if cmd == "quit":
            return False
        elif cmd == "help":
            print(HELP_TEXT)
        elif cmd in ("visit", "post"):
            if len(args) != 2:
                print(f"Uso: {cmd} <URI> <NOMBRE>\n")
                return True
            self.keep("GET" if cmd == "visit" else "POST", args[0], args[1])
            print(f"✓ Contexto '{args[1]}' guardado")
        elif cmd == "history":
            self.show_history()
        elif cmd == "last":
            self.show_last()
        elif cmd == "size":
            if len(args) != 1:
                print("Uso: size <N>\n")
                return True
            self.set_size(args[0])
            print(f"✓ Tamaño máximo: {self.max_size}")
        elif cmd == "logs":
            self.logger.show_logs_summary()
        else:
            print(f"Comando desconocido: {cmd} (escribe 'help')")
        return True


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="history-cli", description="Historial de navegación por sesión")
    parser.add_argument("--init", action="store_true", help="Crea un .env con la configuración por defecto")
    parser.add_argument("--session", default="console", help="Nombre de la sesión persistida")
    parser.add_argument("--env-file", default=None, help="Ruta del .env a cargar")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    if args.init:
        if write_env_template(args.env_file or ".env"):
            print(" Archivo .env creado")
        else:
            print(" El archivo .env ya existe")
        return

    try:
        settings = load_settings(args.env_file)
    except HistoryError as e:
        print(f"❌ Configuración inválida: {e}")
        sys.exit(1)

    console = HistoryConsole(settings, args.session)

    print("\n🧭 Historial de navegación")
    print("=" * 60)
    print(f"Sesión: {args.session} | tamaño máximo: {console.max_size}")
    print(HELP_TEXT)

    while True:
        try:
            user_input = input("🔗 > ").strip()
            if not console.handle(user_input):
                break
        except (KeyboardInterrupt, EOFError):
            print("\n\n⏸️  Interrumpido por el usuario")
            break
        except ValidationError as e:
            print(f"⚠️  {e}\n")
        except (HistoryError, ValueError) as e:
            print(f"\n❌ Error procesando comando: {e}\n")

    print("👋 ¡Hasta luego!\n")


if __name__ == "__main__":
    main()
