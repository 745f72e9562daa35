"""Room configuration loader."""

import csv
from pathlib import Path

from ...exceptions import CatalogError
from ..models import Room, RoomType

# Built-in room inventory
DEFAULT_ROOMS = (
    Room(id="dell", name="Dell 1 (Large Lecture)", type=RoomType.LARGE_LECTURE, capacity=60),
    Room(id="rouss", name="Rouss Hall (Medium)", type=RoomType.MEDIUM, capacity=48),
    Room(id="pavilion-viii", name="Pavilion VIII (Small)", type=RoomType.SMALL, capacity=18),
    Room(id="rouss-403", name="Rouss 403 (Block-Busting)", type=RoomType.MEDIUM, capacity=48),
    Room(id="monroe-120", name="Monroe 120 (Block-Busting)", type=RoomType.LARGE_LECTURE, capacity=60),
    Room(
        id="pavilion-viii-blockbust",
        name="Pavilion VIII Block-Bust",
        type=RoomType.SMALL,
        capacity=18,
    ),
    Room(id="ureg-1", name="UREG Assigned 1", type=RoomType.REGISTRAR, capacity=30),
    Room(id="ureg-2", name="UREG Assigned 2", type=RoomType.REGISTRAR, capacity=30),
    Room(id="ureg-3", name="UREG Assigned 3", type=RoomType.REGISTRAR, capacity=30),
)


class RoomConfig:
    """Loader for room configuration from rooms.csv.

    Expected columns: id, name, type, capacity. Without a file the
    built-in inventory is used.
    """

    def __init__(self, rooms_path: Path | None = None):
        self.rooms: list[Room] = []
        self._ids: set[str] = set()

        if rooms_path and rooms_path.exists():
            self._load(rooms_path)
        else:
            for room in DEFAULT_ROOMS:
                self._add(room)

    def _add(self, room: Room) -> None:
        if room.id in self._ids:
            raise CatalogError("duplicate room id", room.id)
        self.rooms.append(room)
        self._ids.add(room.id)

    def _load(self, path: Path) -> None:
        """Load rooms from CSV file."""
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for row in reader:
                room_id = (row.get("id") or "").strip()
                if not room_id:
                    continue

                type_str = (row.get("type") or "").strip().lower()
                try:
                    room_type = RoomType(type_str)
                except ValueError as e:
                    raise CatalogError(f"unknown room type '{type_str}'", room_id) from e

                capacity_str = (row.get("capacity") or "0").strip()
                try:
                    capacity = int(capacity_str)
                except ValueError as e:
                    raise CatalogError(f"invalid capacity '{capacity_str}'", room_id) from e

                self._add(
                    Room(
                        id=room_id,
                        name=(row.get("name") or room_id).strip(),
                        type=room_type,
                        capacity=capacity,
                    )
                )

        if not self.rooms:
            raise CatalogError(f"no rooms defined in {path}")

    def get_all_rooms(self) -> list[Room]:
        """Get all rooms."""
        return self.rooms
