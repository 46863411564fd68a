"""aiohttp application factory and WebSocket endpoint."""

from __future__ import annotations

import logging

from aiohttp import WSCloseCode, WSMsgType, web

from tripshare._api.rest import add_routes, error_middleware
from tripshare.config import TripShareConfig
from tripshare.context import CONTEXT_KEY, TripShareContext
from tripshare.realtime.broadcaster import WebSocketConnection
from tripshare.realtime.handlers import ConnectionState
from tripshare.state.store import TripStore

_logger = logging.getLogger(__name__)


async def websocket_handler(request: web.Request) -> web.WebSocketResponse:
    """Serve one realtime client until it disconnects.

    Room membership does not survive the connection; a client that
    reconnects must join again and gets a fresh snapshot.
    """
    ctx = request.app[CONTEXT_KEY]
    ws = web.WebSocketResponse(heartbeat=ctx.config.ws_heartbeat or None)
    await ws.prepare(request)

    connection = WebSocketConnection(ws, remote=request.remote)
    state = ConnectionState(connection)
    ctx.sockets.add(ws)
    _logger.debug("Realtime client connected: %r", connection)

    try:
        async for msg in ws:
            if msg.type == WSMsgType.TEXT:
                await ctx.realtime.handle_text(state, msg.data)
            elif msg.type == WSMsgType.ERROR:
                _logger.debug("WebSocket %s closed with error", connection.connection_id, exc_info=ws.exception())
    finally:
        ctx.realtime.disconnect(state)
        ctx.sockets.discard(ws)
        _logger.debug("Realtime client disconnected: %r", connection)

    return ws


async def _close_sockets(app: web.Application) -> None:
    ctx = app[CONTEXT_KEY]
    for ws in set(ctx.sockets):
        await ws.close(code=WSCloseCode.GOING_AWAY, message=b"Server shutdown")


def create_app(config: TripShareConfig | None = None, *, store: TripStore | None = None) -> web.Application:
    """Build the tripshare application.

    Parameters
    ----------
    config : TripShareConfig or None
        Server settings. Defaults to :meth:`TripShareConfig.from_env`.
    store : TripStore or None
        Pre-populated store to serve. A fresh one is created when omitted.

    Returns
    -------
    aiohttp.web.Application
        Application with the REST routes and the WebSocket endpoint.
    """
    if config is None:
        config = TripShareConfig.from_env()

    ctx = TripShareContext.build(config, store=store)
    if config.seed_demo:
        ctx.store.seed_demo()

    app = web.Application(middlewares=[error_middleware])
    app[CONTEXT_KEY] = ctx
    add_routes(app, config.api_prefix)
    app.router.add_get(config.ws_path, websocket_handler)
    app.on_shutdown.append(_close_sockets)
    return app


def run(config: TripShareConfig | None = None) -> None:
    """Serve until interrupted."""
    if config is None:
        config = TripShareConfig.from_env()
    app = create_app(config)
    _logger.info("Serving on http://%s:%d (realtime at %s)", config.host, config.port, config.ws_path)
    web.run_app(app, host=config.host, port=config.port, print=None)
