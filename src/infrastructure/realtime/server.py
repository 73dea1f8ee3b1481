"""
Realtime (Socket.IO) server.

The HTTP API doesn't implement any realtime protocol. It only needs to
start a Socket.IO server next to itself and answer handshake probes. This
module hides python-socketio behind a narrow interface: start(),
is_running(), stop() and wrap().

Connections must present an access token in the Socket.IO auth payload;
the same auth provider as the dashboard gate verifies it. Any origin may
open the transport; the token is what admits a client.
"""

import logging
from typing import Any, Optional, Protocol

import socketio
from socketio.exceptions import ConnectionRefusedError as ConnectionRefused

from src.core.accounts.gate import AuthProvider, AuthProviderError

logger = logging.getLogger(__name__)


class RealtimeServer(Protocol):
    """Black-box realtime collaborator."""

    def start(self) -> None: ...

    def stop(self) -> None: ...

    def is_running(self) -> bool: ...

    def wrap(self, app: Any) -> Any: ...


class SocketIORealtimeServer:
    """
    python-socketio AsyncServer in ASGI mode.

    wrap() puts the Socket.IO transport in front of the HTTP app: requests
    under /{socketio_path}/ go to Socket.IO, everything else falls through
    to FastAPI. Connections are refused until start() is called.
    """

    def __init__(
        self,
        auth: AuthProvider,
        cors_allowed_origins: list[str] | str = "*",
        socketio_path: str = "socket.io",
    ) -> None:
        self._auth = auth
        self._socketio_path = socketio_path
        self._running = False

        self._sio = socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=cors_allowed_origins,
        )
        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)

    @property
    def sio(self) -> socketio.AsyncServer:
        return self._sio

    def start(self) -> None:
        if self._running:
            logger.info("Socket.IO server already running")
            return

        self._running = True
        logger.info(
            "Socket.IO server initialized",
            extra={"path": f"/{self._socketio_path}"}
        )

    def stop(self) -> None:
        self._running = False
        logger.info("Socket.IO server stopped")

    def is_running(self) -> bool:
        return self._running

    def wrap(self, app: Any) -> Any:
        return socketio.ASGIApp(
            self._sio,
            other_asgi_app=app,
            socketio_path=self._socketio_path,
        )

    async def _on_connect(self, sid: str, environ: dict, auth: Optional[dict] = None) -> None:
        if not self._running:
            raise ConnectionRefused("Realtime server not running")

        token = (auth or {}).get("token")
        if not token:
            raise ConnectionRefused("Authentication error: Token missing")

        try:
            user = await self._auth.get_user(token)
        except AuthProviderError as e:
            logger.error("Socket authentication error", extra={"sid": sid, "error": str(e)})
            raise ConnectionRefused("Authentication error")

        if user is None:
            raise ConnectionRefused("Authentication error: Invalid token")

        await self._sio.save_session(sid, {"user_id": user.id})
        logger.info("Socket connected", extra={"sid": sid, "user_id": user.id})

    async def _on_disconnect(self, sid: str, *args: Any) -> None:
        logger.info("Socket disconnected", extra={"sid": sid})


# ---------------------------------------------------------------------------
# Mock Server for Local Development
# ---------------------------------------------------------------------------

class MockRealtimeServer:
    """Records lifecycle calls; wrap() leaves the app untouched."""

    def __init__(self) -> None:
        self._running = False
        self.start_calls = 0

    def start(self) -> None:
        self.start_calls += 1
        self._running = True

    def stop(self) -> None:
        self._running = False

    def is_running(self) -> bool:
        return self._running

    def wrap(self, app: Any) -> Any:
        return app


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_realtime_server(
    auth: Optional[AuthProvider] = None,
    cors_allowed_origins: list[str] | str = "*",
    mock_mode: bool = False,
) -> RealtimeServer:
    """Create the realtime collaborator: Socket.IO or a no-op mock."""
    if mock_mode:
        return MockRealtimeServer()

    if auth is None:
        raise ValueError("auth is required when not in mock mode")

    return SocketIORealtimeServer(auth, cors_allowed_origins=cors_allowed_origins)
