"""
FastAPI WebSocket server for the Startups game.
"""

import json
import logging
import uuid
from collections import defaultdict
from typing import Dict, List, Optional, Set

import orjson
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from ..engine import apply_intent, join_room, remove_player, start_game
from ..errors import GameError
from ..models import Room
from ..serialization import get_public_room_info, sanitize_state, serialize_result
from ..store import RoomStore
from .events import (
    ChatEvent, CreateRoomEvent, ErrorCode, JoinRoomEvent, LeaveRoomEvent,
    PlayerActionEvent, RequestStateEvent, StartGameEvent,
    create_chat_event, create_error_event, create_game_ended_event,
    create_room_joined_event, create_state_full_event, parse_inbound_event,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(title="Startups Game Engine", version="1.0.0")

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global state
store = RoomStore()
room_connections: Dict[str, Set[WebSocket]] = defaultdict(set)
connection_players: Dict[WebSocket, str] = {}
connection_rooms: Dict[WebSocket, Optional[str]] = {}


def dumps(payload: Dict) -> str:
    return orjson.dumps(payload).decode()


class ConnectionManager:
    """Manages WebSocket connections and broadcasting."""

    def register(self, websocket: WebSocket) -> str:
        """Assign an identity to a freshly accepted socket."""
        player_id = uuid.uuid4().hex[:12]
        connection_players[websocket] = player_id
        connection_rooms[websocket] = None
        return player_id

    def attach(self, websocket: WebSocket, room_code: str):
        """Subscribe a socket to a room's broadcasts."""
        room_connections[room_code].add(websocket)
        connection_rooms[websocket] = room_code
        logger.info(f"Player {connection_players.get(websocket)} attached to room {room_code}")

    def detach(self, websocket: WebSocket) -> Optional[str]:
        """Unsubscribe a socket from its room. Returns the room code it left."""
        room_code = connection_rooms.get(websocket)
        if room_code and websocket in room_connections.get(room_code, ()):
            room_connections[room_code].discard(websocket)
            if not room_connections[room_code]:
                del room_connections[room_code]
        if websocket in connection_rooms:
            connection_rooms[websocket] = None
        return room_code

    def forget(self, websocket: WebSocket):
        self.detach(websocket)
        connection_players.pop(websocket, None)
        connection_rooms.pop(websocket, None)

    async def send(self, websocket: WebSocket, payload: Dict):
        await websocket.send_text(dumps(payload))

    async def send_error(self, websocket: WebSocket, code: ErrorCode, message: str):
        await websocket.send_text(create_error_event(code, message).model_dump_json())

    async def broadcast_state(self, room: Room):
        """Send every subscriber their own view of the room."""
        dead = []
        for websocket in list(room_connections.get(room.code, ())):
            player_id = connection_players.get(websocket)
            try:
                event = create_state_full_event(sanitize_state(room, player_id))
                await self.send(websocket, event.model_dump(mode="json"))
            except Exception as e:
                logger.error(f"Error broadcasting to {player_id}: {e}")
                dead.append(websocket)
        await self.drop(dead)

    async def broadcast(self, room_code: str, payload: Dict):
        dead = []
        for websocket in list(room_connections.get(room_code, ())):
            try:
                await self.send(websocket, payload)
            except Exception as e:
                logger.error(f"Error broadcasting to {connection_players.get(websocket)}: {e}")
                dead.append(websocket)
        await self.drop(dead)

    async def drop(self, websockets: List[WebSocket]):
        """Treat sockets that can no longer be written to as departed players."""
        for websocket in websockets:
            await leave_current_room(websocket)


manager = ConnectionManager()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "rooms": len(store),
        "connections": sum(len(conns) for conns in room_connections.values())
    }


@app.get("/rooms")
async def list_rooms():
    """Open lobbies that can still be joined."""
    return {
        "rooms": [
            get_public_room_info(room)
            for room in store.list_rooms()
            if not room.game_started
        ]
    }


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Main WebSocket endpoint."""
    await websocket.accept()
    player_id = manager.register(websocket)
    logger.info(f"WebSocket connection accepted for {player_id}")

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                event = parse_inbound_event(json.loads(raw_data))
                await handle_event(websocket, event)
            except ValueError as e:
                # json.JSONDecodeError is a ValueError too
                await manager.send_error(websocket, ErrorCode.INVALID_EVENT, str(e))
            except GameError as e:
                await manager.send_error(websocket, ErrorCode.from_engine(e.code), e.message)
            except WebSocketDisconnect:
                raise
            except Exception:
                logger.exception(f"Error handling event from {player_id}")
                await manager.send_error(websocket, ErrorCode.INTERNAL, "Internal server error")
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: {player_id}")
    finally:
        await leave_current_room(websocket)
        manager.forget(websocket)


async def handle_event(websocket: WebSocket, event) -> Dict:
    """Handle an inbound event."""
    if isinstance(event, CreateRoomEvent):
        return await handle_create_room(websocket, event)
    elif isinstance(event, JoinRoomEvent):
        return await handle_join_room(websocket, event)
    elif isinstance(event, StartGameEvent):
        return await handle_start_game(websocket, event)
    elif isinstance(event, PlayerActionEvent):
        return await handle_player_action(websocket, event)
    elif isinstance(event, RequestStateEvent):
        return await handle_request_state(websocket, event)
    elif isinstance(event, ChatEvent):
        return await handle_chat(websocket, event)
    elif isinstance(event, LeaveRoomEvent):
        return await handle_leave_room(websocket, event)
    else:
        raise ValueError(f"Unhandled event type: {type(event)}")


async def _current_room(websocket: WebSocket) -> Optional[Room]:
    room_code = connection_rooms.get(websocket)
    room = store.get(room_code) if room_code else None
    if room is None:
        await manager.send_error(websocket, ErrorCode.NOT_IN_ROOM, "Not in a room")
    return room


async def _seat_player(websocket: WebSocket, room: Room, name: str) -> Dict:
    player_id = connection_players[websocket]
    with store.lock(room.code):
        result = join_room(room, player_id, name)

    if not result.success:
        await manager.send_error(websocket, ErrorCode.from_engine(result.error_code), result.error_message)
        return {"success": False, "error": result.error_message}

    manager.attach(websocket, room.code)
    await manager.send(websocket, create_room_joined_event(room.code, player_id).model_dump(mode="json"))
    await manager.broadcast_state(room)
    return {"success": True, "player_id": player_id, "room_code": room.code}


async def handle_create_room(websocket: WebSocket, event: CreateRoomEvent) -> Dict:
    """Create a room with the caller as owner and seat them."""
    if connection_rooms.get(websocket):
        await manager.send_error(websocket, ErrorCode.ALREADY_IN_ROOM, "Leave your current room first")
        return {"success": False}

    room = store.create(connection_players[websocket])
    return await _seat_player(websocket, room, event.name)


async def handle_join_room(websocket: WebSocket, event: JoinRoomEvent) -> Dict:
    """Handle join room event."""
    if connection_rooms.get(websocket):
        await manager.send_error(websocket, ErrorCode.ALREADY_IN_ROOM, "Leave your current room first")
        return {"success": False}

    room = store.require(event.room_code)
    return await _seat_player(websocket, room, event.name)


async def handle_start_game(websocket: WebSocket, event: StartGameEvent) -> Dict:
    """Handle start game event."""
    room = await _current_room(websocket)
    if room is None:
        return {"success": False}

    with store.lock(room.code):
        result = start_game(room, seed=event.seed, requested_by=connection_players[websocket])

    if not result.success:
        await manager.send_error(websocket, ErrorCode.from_engine(result.error_code), result.error_message)
        return {"success": False}

    logger.info(f"Game started in room {room.code}, first player {room.current_player.name}")
    await manager.broadcast_state(room)
    return {"success": True}


async def handle_player_action(websocket: WebSocket, event: PlayerActionEvent) -> Dict:
    """Handle one draw or disposal action."""
    room = await _current_room(websocket)
    if room is None:
        return {"success": False}

    player_id = connection_players[websocket]
    with store.lock(room.code):
        result = apply_intent(room, player_id, event.action, event.payload())

    if not result.success:
        await manager.send_error(websocket, ErrorCode.from_engine(result.error_code), result.error_message)
        return {"success": False}

    await manager.broadcast_state(room)
    if result.data.get("game_ended"):
        await broadcast_results(room)
    return {"success": True}


async def handle_request_state(websocket: WebSocket, event: RequestStateEvent) -> Dict:
    """Handle request state event."""
    room = await _current_room(websocket)
    if room is None:
        return {"success": False}

    sanitized_state = sanitize_state(room, connection_players[websocket])
    await manager.send(websocket, create_state_full_event(sanitized_state).model_dump(mode="json"))
    return {"success": True}


async def handle_chat(websocket: WebSocket, event: ChatEvent) -> Dict:
    """Handle chat message event."""
    room = await _current_room(websocket)
    if room is None:
        return {"success": False}

    player = room.get_player(connection_players[websocket])
    if not player:
        return {"success": False}

    chat_event = create_chat_event(player.id, player.name, event.text)
    await manager.broadcast(room.code, chat_event.model_dump(mode="json"))
    return {"success": True}


async def handle_leave_room(websocket: WebSocket, event: LeaveRoomEvent) -> Dict:
    room = await _current_room(websocket)
    if room is None:
        return {"success": False}
    await leave_current_room(websocket)
    return {"success": True}


async def leave_current_room(websocket: WebSocket):
    """Remove the socket's player from its room and tell everyone left."""
    room_code = manager.detach(websocket)
    player_id = connection_players.get(websocket)
    room = store.get(room_code) if room_code else None
    if room is None or player_id is None:
        return

    with store.lock(room.code):
        result = remove_player(room, player_id)
    if not result.success:
        return

    if result.data.get("empty"):
        store.delete(room.code)
        return

    await manager.broadcast_state(room)
    if result.data.get("game_ended"):
        await broadcast_results(room)


async def broadcast_results(room: Room):
    event = create_game_ended_event([serialize_result(r) for r in room.results], room.end_reason)
    await manager.broadcast(room.code, event.model_dump(mode="json"))
