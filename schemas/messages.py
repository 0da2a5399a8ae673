from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


class RoomData(BaseModel):
    room: str = Field(min_length=1, max_length=128)


class JoinData(RoomData):
    isHost: bool = False


class SignalData(RoomData):
    # offer / answer / candidate blob, never inspected
    payload: Dict[str, Any] = Field(validation_alias=AliasChoices("payload", "data"))


class CursorResponseData(RoomData):
    viewerId: str = Field(validation_alias=AliasChoices("viewerId", "clientId"))
    approved: bool = False


class MouseMoveData(RoomData):
    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)


class MouseClickData(RoomData):
    button: Literal["left", "right", "middle"] = "left"


class InputEventData(RoomData):
    model_config = ConfigDict(extra="allow")

    kind: str = Field(min_length=1)


class JoinMessage(BaseModel):
    event: Literal["join"]
    data: JoinData


class StartHostMessage(BaseModel):
    event: Literal["start-host"]
    data: RoomData


class SignalMessage(BaseModel):
    event: Literal["signal"]
    data: SignalData


class CursorRequestMessage(BaseModel):
    event: Literal["cursor-request"]
    data: RoomData


class CursorResponseMessage(BaseModel):
    event: Literal["cursor-response"]
    data: CursorResponseData


class MouseMoveMessage(BaseModel):
    event: Literal["mouseMove"]
    data: MouseMoveData


class MouseClickMessage(BaseModel):
    event: Literal["mouseClick"]
    data: MouseClickData


class InputEventMessage(BaseModel):
    event: Literal["input-event"]
    data: InputEventData


class LeaveMessage(BaseModel):
    event: Literal["leave"]
    data: RoomData


InboundMessage = Annotated[
    Union[
        JoinMessage,
        StartHostMessage,
        SignalMessage,
        CursorRequestMessage,
        CursorResponseMessage,
        MouseMoveMessage,
        MouseClickMessage,
        InputEventMessage,
        LeaveMessage,
    ],
    Field(discriminator="event"),
]

inbound_adapter = TypeAdapter(InboundMessage)


def parse_inbound(raw: Union[str, bytes]) -> InboundMessage:
    """Validate a raw JSON frame into one of the inbound message models.

    Raises pydantic.ValidationError for non-JSON, unknown events and bad payloads.
    """
    return inbound_adapter.validate_json(raw)


class SignalEnvelope(BaseModel):
    senderId: str
    payload: Dict[str, Any]


class ServerFrame(BaseModel):
    event: str
    data: Optional[Any] = None
