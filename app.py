from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.websockets import WebSocketState
from typing import Optional
import uuid

import events
from backend import RoomAnnouncer, create_announcer
from constants import CORS_ORIGINS, ICE_SERVERS, LOG_LEVEL, LOG_FILE
from logging_config import get_logger, setup_logging
from relay.connections import ConnectionManager
from relay.handler import Outbound, SessionHandler
from routers.rooms import rooms_router
from schemas.messages import parse_inbound
from schemas.rooms import HealthResponse, IceServersResponse

# Setup logging
setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
logger = get_logger(__name__)


def create_app(handler: Optional[SessionHandler] = None, announcer: Optional[RoomAnnouncer] = None) -> FastAPI:
    """Build the relay application around its own SessionHandler.

    Each app owns independent relay state, so several can coexist in one
    process (tests, multiple listeners).
    """
    app = FastAPI(title="Screen Share Relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    if handler is None:
        handler = SessionHandler(announcer=announcer or create_announcer())
    app.state.handler = handler
    app.state.connections = ConnectionManager()

    app.include_router(rooms_router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        logger.debug("Health check requested")
        return HealthResponse(
            status="ok",
            instance_id=handler.announcer.instance_id,
            rooms=len(handler.directory),
            connections=len(app.state.connections),
        )

    @app.get("/ice-servers", response_model=IceServersResponse)
    async def get_ice_servers():
        # Static STUN/TURN pool; clients pass it straight to RTCPeerConnection
        return IceServersResponse(ice_servers=ICE_SERVERS)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        """Relay endpoint. Frames are JSON `{"event": ..., "data": {...}}` both ways."""
        connections: ConnectionManager = app.state.connections
        connection_id = str(uuid.uuid4())

        await websocket.accept()
        connections.register(connection_id, websocket)
        logger.info(f"User connected: {connection_id}")
        connections.deliver([
            Outbound(connection_id, events.CONNECTED, {"connId": connection_id, "iceServers": ICE_SERVERS})
        ])

        try:
            message_count = 0
            while True:
                try:
                    raw = await websocket.receive_text()
                except WebSocketDisconnect:
                    logger.info(f"WebSocket disconnected normally for connection {connection_id}")
                    break
                message_count += 1

                try:
                    message = parse_inbound(raw)
                except ValidationError as e:
                    logger.warning(f"Invalid message #{message_count} from {connection_id}: {e.error_count()} errors")
                    connections.deliver([
                        Outbound(connection_id, events.ERROR, {"message": f"Invalid message: {e.errors()[0]['msg']}"})
                    ])
                    continue

                logger.debug(f"Received {message.event} (#{message_count}) from connection {connection_id}")
                connections.deliver(handler.dispatch(connection_id, message))
        except Exception as e:
            logger.error(f"WebSocket error for connection {connection_id}: {e}", exc_info=True)
        finally:
            await connections.unregister(connection_id)
            connections.deliver(handler.disconnect(connection_id))
            if websocket.client_state == WebSocketState.CONNECTED:
                try:
                    await websocket.close()
                except Exception as e:
                    logger.debug(f"Error closing WebSocket: {e}")

    logger.info("FastAPI application initialized")
    return app


app = create_app()
