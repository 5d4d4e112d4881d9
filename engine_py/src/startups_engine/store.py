"""In-memory room registry"""

import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional

from . import errors
from .constants import normalize_room_code
from .engine import create_room, generate_room_code
from .models import Room
from .rules import RuleConfig

logger = logging.getLogger(__name__)


class RoomStore:
    """
    Process-wide map of room code to Room.

    Codes are case-insensitive. Callers must hold `lock(code)` around any
    engine call that mutates the room so intents for one room never
    interleave.
    """

    def __init__(self, rules: Optional[RuleConfig] = None):
        self.rooms: Dict[str, Room] = {}
        self.room_locks = defaultdict(threading.Lock)
        self.rules = rules
        self._registry_lock = threading.Lock()

    def create(self, owner_id: str, code: Optional[str] = None) -> Room:
        with self._registry_lock:
            if code is None:
                code = generate_room_code()
                while code in self.rooms:
                    code = generate_room_code()
            code = normalize_room_code(code)
            if code in self.rooms:
                errors.raise_error(errors.INTERNAL_ERROR, f"Room {code} already exists")
            room = create_room(owner_id, code=code, rules=self.rules)
            self.rooms[code] = room
        logger.info(f"Created room {code} for {owner_id}")
        return room

    def get(self, code: str) -> Optional[Room]:
        return self.rooms.get(normalize_room_code(code))

    def require(self, code: str) -> Room:
        room = self.get(code)
        if room is None:
            errors.raise_error(errors.ROOM_NOT_FOUND, "Room not found")
        return room

    def put(self, room: Room):
        with self._registry_lock:
            self.rooms[normalize_room_code(room.code)] = room

    def delete(self, code: str) -> bool:
        code = normalize_room_code(code)
        with self._registry_lock:
            removed = self.rooms.pop(code, None)
            self.room_locks.pop(code, None)
        if removed is not None:
            logger.info(f"Deleted room {code}")
        return removed is not None

    def lock(self, code: str) -> threading.Lock:
        return self.room_locks[normalize_room_code(code)]

    def list_rooms(self) -> List[Room]:
        return list(self.rooms.values())

    def find_player_room(self, player_id: str) -> Optional[Room]:
        for room in self.rooms.values():
            if room.get_player(player_id) is not None:
                return room
        return None

    def __contains__(self, code: str) -> bool:
        return normalize_room_code(code) in self.rooms

    def __len__(self) -> int:
        return len(self.rooms)
