"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError


class EventType(str, Enum):
    """Inbound event types."""
    CREATE_ROOM = "create_room"
    JOIN_ROOM = "join_room"
    START_GAME = "start_game"
    PLAYER_ACTION = "player_action"
    REQUEST_STATE = "request_state"
    CHAT = "chat"
    LEAVE_ROOM = "leave_room"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    ROOM_JOINED = "room_joined"
    STATE_FULL = "state_full"
    GAME_ENDED = "game_ended"
    ERROR = "error"
    CHAT = "chat"


class ErrorCode(str, Enum):
    """Error codes for client events."""
    INVALID_EVENT = "INVALID_EVENT"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    NOT_ENOUGH_PLAYERS = "NOT_ENOUGH_PLAYERS"
    NOT_OWNER = "NOT_OWNER"
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    ALREADY_IN_ROOM = "ALREADY_IN_ROOM"
    NOT_IN_ROOM = "NOT_IN_ROOM"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    WRONG_PHASE = "WRONG_PHASE"
    INSUFFICIENT_CHIPS = "INSUFFICIENT_CHIPS"
    DECK_EMPTY = "DECK_EMPTY"
    INVALID_INDEX = "INVALID_INDEX"
    ANTI_CHIP_HOLDER = "ANTI_CHIP_HOLDER"
    SAME_COMPANY_RETURN = "SAME_COMPANY_RETURN"
    LAST_CARD_MUST_PORTFOLIO = "LAST_CARD_MUST_PORTFOLIO"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    INTERNAL = "INTERNAL"

    @classmethod
    def from_engine(cls, code: Optional[str]) -> 'ErrorCode':
        try:
            return cls(code)
        except ValueError:
            return cls.INTERNAL


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class CreateRoomEvent(BaseEvent):
    """Create a room and join it as owner."""
    type: EventType = EventType.CREATE_ROOM
    name: str = Field(..., min_length=1, max_length=30)


class JoinRoomEvent(BaseEvent):
    """Join an existing room by code."""
    type: EventType = EventType.JOIN_ROOM
    room_code: str = Field(..., min_length=1, max_length=10)
    name: str = Field(..., min_length=1, max_length=30)


class StartGameEvent(BaseEvent):
    """Start game event."""
    type: EventType = EventType.START_GAME
    seed: Optional[int] = None


class PlayerActionEvent(BaseEvent):
    """One draw or disposal action."""
    type: EventType = EventType.PLAYER_ACTION
    action: Literal["take_from_deck", "take_from_market", "play_to_portfolio", "play_to_market"]
    market_index: Optional[int] = Field(default=None, ge=0, strict=True)
    hand_index: Optional[int] = Field(default=None, ge=0, strict=True)

    def payload(self) -> Dict[str, int]:
        data = {}
        if self.market_index is not None:
            data["market_index"] = self.market_index
        if self.hand_index is not None:
            data["hand_index"] = self.hand_index
        return data


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


class ChatEvent(BaseEvent):
    """Chat message event."""
    type: EventType = EventType.CHAT
    text: str = Field(..., min_length=1, max_length=200)


class LeaveRoomEvent(BaseEvent):
    """Leave the current room."""
    type: EventType = EventType.LEAVE_ROOM


# Union type for all inbound events
InboundEvent = Union[
    CreateRoomEvent,
    JoinRoomEvent,
    StartGameEvent,
    PlayerActionEvent,
    RequestStateEvent,
    ChatEvent,
    LeaveRoomEvent,
]


# Outbound event models
class RoomJoinedEvent(BaseModel):
    """Join confirmation sent to the joining player only."""
    type: OutboundEventType = OutboundEventType.ROOM_JOINED
    room_code: str
    player_id: str
    timestamp: float


class StateFullEvent(BaseModel):
    """Full state event."""
    type: OutboundEventType = OutboundEventType.STATE_FULL
    state: Dict[str, Any]
    timestamp: float


class GameEndedEvent(BaseModel):
    """Final ranking broadcast."""
    type: OutboundEventType = OutboundEventType.GAME_ENDED
    reason: Optional[str] = None
    results: List[Dict[str, Any]]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error event."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: ErrorCode
    message: str
    timestamp: float


class ChatMessageEvent(BaseModel):
    """Chat message event."""
    type: OutboundEventType = OutboundEventType.CHAT
    player_id: str
    player_name: str
    text: str
    timestamp: float


EVENT_MAP = {
    EventType.CREATE_ROOM: CreateRoomEvent,
    EventType.JOIN_ROOM: JoinRoomEvent,
    EventType.START_GAME: StartGameEvent,
    EventType.PLAYER_ACTION: PlayerActionEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
    EventType.CHAT: ChatEvent,
    EventType.LEAVE_ROOM: LeaveRoomEvent,
}


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    try:
        return EVENT_MAP[event_type](**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e}")


def create_error_event(code: ErrorCode, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_room_joined_event(room_code: str, player_id: str) -> RoomJoinedEvent:
    """Create a join confirmation event."""
    return RoomJoinedEvent(room_code=room_code, player_id=player_id, timestamp=time.time())


def create_state_full_event(state: Dict[str, Any]) -> StateFullEvent:
    """Create a full state event."""
    return StateFullEvent(state=state, timestamp=time.time())


def create_game_ended_event(results: List[Dict[str, Any]], reason: Optional[str] = None) -> GameEndedEvent:
    return GameEndedEvent(reason=reason, results=results, timestamp=time.time())


def create_chat_event(player_id: str, player_name: str, text: str) -> ChatMessageEvent:
    """Create a chat message event."""
    return ChatMessageEvent(
        player_id=player_id,
        player_name=player_name,
        text=text,
        timestamp=time.time()
    )
