"""
ASGI middleware.

The app-wide CORS policy answers browser preflights itself, before any
route runs. The realtime handshake endpoint has its own fixed CORS
headers, so its path is handed straight to the app instead.
"""

from typing import Any, Sequence

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class PathScopedCORSMiddleware:
    """CORSMiddleware for every path except the exempt prefixes."""

    def __init__(
        self,
        app: ASGIApp,
        exempt_paths: Sequence[str] = (),
        **cors_options: Any,
    ) -> None:
        self._app = app
        self._cors = CORSMiddleware(app, **cors_options)
        self._exempt_paths = tuple(path.rstrip("/") for path in exempt_paths)

    def _is_exempt(self, path: str) -> bool:
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self._exempt_paths
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") == "http" and self._is_exempt(scope.get("path", "")):
            await self._app(scope, receive, send)
            return

        await self._cors(scope, receive, send)
