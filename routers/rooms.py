from fastapi import APIRouter, HTTPException, Request
from schemas.rooms import RoomOwnerResponse, RoomStatusResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


@rooms_router.get("/{room_id}", response_model=RoomStatusResponse)
async def get_room_status(room_id: str, request: Request):
    """
    Get the live state of a room hosted on this instance.

    Returns:
    - room_id: Room code
    - hosted: Always true; rooms without a host do not exist
    - viewer_count: Viewers currently joined
    - authorized_count: Viewers currently allowed to send input
    - mailbox_size: Signals waiting for a recipient
    """
    client_host = request.client.host if request.client else 'unknown'
    logger.info(f"Room status request for {room_id} from {client_host}")

    status = request.app.state.handler.room_status(room_id)
    if status is None:
        logger.info(f"Room status failed: no host in room {room_id}")
        raise HTTPException(status_code=404, detail="No host found in room")
    return RoomStatusResponse(**status)


@rooms_router.get("/{room_id}/owner", response_model=RoomOwnerResponse)
async def get_room_owner(room_id: str, request: Request):
    """Resolve which relay instance hosts a room code (for sticky routing)."""
    handler = request.app.state.handler
    announcer = handler.announcer

    owner = announcer.owner_of(room_id)
    if owner is None and handler.directory.host_of(room_id) is not None:
        owner = announcer.instance_id
    if owner is None:
        logger.info(f"Room owner lookup failed: {room_id} is not hosted anywhere")
        raise HTTPException(status_code=404, detail="Room not found")

    return RoomOwnerResponse(room_id=room_id, instance_id=owner)
