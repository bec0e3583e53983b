"""
Aplicación aiohttp que registra el historial en cada petición
"""
from pathlib import Path
from typing import Optional

from aiohttp import web

from utils.serialization import contexts_to_list

from .browser import Browser
from .config import HistorySettings, load_settings
from .errors import InvalidOperationError, ValidationError
from .logging_history import HistoryLogger
from .session import SessionRegistry, file_store_factory, memory_store_factory

SETTINGS_KEY = web.AppKey("settings", HistorySettings)
REGISTRY_KEY = web.AppKey("registry", SessionRegistry)
LOGGER_KEY = web.AppKey("logger", HistoryLogger)


class AiohttpRequest:
    """Adapta aiohttp.web.Request al contrato method()/uri()"""

    def __init__(self, request: web.Request):
        self._request = request

    def method(self) -> str:
        return self._request.method

    def uri(self) -> str:
        return str(self._request.url)


@web.middleware
async def browser_middleware(request: web.Request, handler):
    app = request.app
    settings = app[SETTINGS_KEY]
    session_id, session = app[REGISTRY_KEY].get_or_create(request.cookies.get(settings.cookie_name))

    request["session_id"] = session_id
    request["browser"] = Browser(
        AiohttpRequest(request), session, settings.max_size,
        logger=app[LOGGER_KEY], session_id=session_id
    )

    try:
        response = await handler(request)
    except InvalidOperationError as e:
        response = web.json_response({"error": str(e)}, status=405)
    except ValidationError as e:
        response = web.json_response({"error": str(e)}, status=400)
    except web.HTTPException as e:
        # 404 y redirecciones también llevan la cookie
        response = web.Response(status=e.status, reason=e.reason, text=e.text, headers=e.headers)

    response.set_cookie(settings.cookie_name, session_id, httponly=True)
    return response


def _history_payload(browser: Browser) -> dict:
    last = browser.get_last_context()
    return {
        "history": contexts_to_list(browser.get_context_history()),
        "last": last.to_dict() if last else None,
    }


async def handle_history(request: web.Request) -> web.Response:
    return web.json_response(_history_payload(request["browser"]))


async def handle_keep_context(request: web.Request) -> web.Response:
    browser: Browser = request["browser"]
    browser.keep_current_context(request.match_info["name"])
    return web.json_response(_history_payload(browser))


def create_app(settings: Optional[HistorySettings] = None, registry: Optional[SessionRegistry] = None,
               logger: Optional[HistoryLogger] = None) -> web.Application:
    settings = settings or load_settings()
    if registry is None:
        factory = file_store_factory(Path(settings.store_dir)) if settings.store_dir else memory_store_factory
        registry = SessionRegistry(factory)

    app = web.Application(middlewares=[browser_middleware])
    app[SETTINGS_KEY] = settings
    app[REGISTRY_KEY] = registry
    app[LOGGER_KEY] = logger or HistoryLogger(settings.log_file, settings.log_level, console=settings.debug)

    app.router.add_get("/history", handle_history)
    app.router.add_route("*", "/contexts/{name}", handle_keep_context)
    return app


def main():
    settings = load_settings()
    web.run_app(create_app(settings), port=settings.port)


if __name__ == "__main__":
    main()
