from pydantic import BaseModel
from typing import List, Optional, Union


class RoomStatusResponse(BaseModel):
    room_id: str
    hosted: bool
    viewer_count: int
    authorized_count: int
    mailbox_size: int


class RoomOwnerResponse(BaseModel):
    room_id: str
    instance_id: str

class IceServer(BaseModel):
    urls: Union[str, List[str]]
    username: Optional[str] = None
    credential: Optional[str] = None

class IceServersResponse(BaseModel):
    ice_servers: List[IceServer]

class HealthResponse(BaseModel):
    status: str
    instance_id: str
    rooms: int
    connections: int
