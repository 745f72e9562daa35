"""Room catalog and room assignment rules."""

from typing import Iterable

from ..exceptions import CatalogError
from .blocks import is_restricted_block
from .config.rooms import DEFAULT_ROOMS
from .constants import (
    CORE_LARGE_ROOM_THRESHOLD,
    DEFAULT_BLOCK_ROOM_IDS,
    LARGE_ROOM_THRESHOLD,
    MEDIUM_ROOM_THRESHOLD,
    SMALL_ROOM_THRESHOLD,
)
from .models import Course, CourseType, Room, RoomType, ScheduledSection, TimeSlot


class RoomCatalog:
    """Read-only room inventory with rule-based room selection.

    Priority order for the ideal room of a course:
    1. Preferred room type, if a room of that type fits
    2. Core courses: single-section courses and sections over 48 students
       go to the large lecture hall, otherwise the medium room
    3. Capstones and advanced projects up to 20 students: the small room
    4. Electives: small (<= 20), medium (<= 48) or large (<= 60) room
    5. A registrar-assigned room

    Restricted-block placements instead use the designated block rooms.
    """

    def __init__(
        self,
        rooms: Iterable[Room] | None = None,
        block_room_ids: Iterable[str] | None = None,
    ):
        self.rooms: tuple[Room, ...] = tuple(DEFAULT_ROOMS if rooms is None else rooms)
        if not self.rooms:
            raise CatalogError("room catalog is empty")

        self._by_id: dict[str, Room] = {}
        for room in self.rooms:
            if room.id in self._by_id:
                raise CatalogError("duplicate room id", room.id)
            self._by_id[room.id] = room

        ids = DEFAULT_BLOCK_ROOM_IDS if block_room_ids is None else block_room_ids
        self.block_room_ids: frozenset[str] = frozenset(
            room_id for room_id in ids if room_id in self._by_id
        )

    def __len__(self) -> int:
        return len(self.rooms)

    def get(self, room_id: str) -> Room | None:
        return self._by_id.get(room_id)

    def is_block_room(self, room: Room) -> bool:
        return room.id in self.block_room_ids

    @property
    def block_rooms(self) -> list[Room]:
        return [r for r in self.rooms if self.is_block_room(r)]

    @property
    def standard_rooms(self) -> list[Room]:
        return [r for r in self.rooms if not self.is_block_room(r)]

    def _first_of_type(self, room_type: RoomType) -> Room | None:
        """First standard (non-block) room of a type, in catalog order."""
        for room in self.standard_rooms:
            if room.type == room_type:
                return room
        return None

    def _fallback_room(self, enrollment_cap: int) -> Room:
        """Smallest standard room that fits, else the largest room."""
        candidates = self.standard_rooms or list(self.rooms)
        fitting = [r for r in candidates if r.capacity >= enrollment_cap]
        if fitting:
            return min(fitting, key=lambda r: r.capacity)
        return max(candidates, key=lambda r: r.capacity)

    def assign_room(self, course: Course, enrollment_cap: int) -> Room:
        """Pick the ideal room for a course section, ignoring availability.

        Args:
            course: Course being placed
            enrollment_cap: Enrollment cap of the section

        Returns:
            The ideal room (never None for a non-empty catalog)
        """
        if course.preferred_room is not None:
            preferred = self._first_of_type(course.preferred_room)
            if preferred and preferred.capacity >= enrollment_cap:
                return preferred

        room_type: RoomType | None = None
        if course.type == CourseType.CORE:
            if course.number_of_sections == 1 or enrollment_cap > CORE_LARGE_ROOM_THRESHOLD:
                room_type = RoomType.LARGE_LECTURE
            else:
                room_type = RoomType.MEDIUM
        elif course.type in (CourseType.CAPSTONE, CourseType.ADVANCED_PROJECT):
            if enrollment_cap <= SMALL_ROOM_THRESHOLD:
                room_type = RoomType.SMALL
        elif course.type == CourseType.ELECTIVE:
            if enrollment_cap <= SMALL_ROOM_THRESHOLD:
                room_type = RoomType.SMALL
            elif enrollment_cap <= MEDIUM_ROOM_THRESHOLD:
                room_type = RoomType.MEDIUM
            elif enrollment_cap <= LARGE_ROOM_THRESHOLD:
                room_type = RoomType.LARGE_LECTURE

        for candidate_type in (room_type, RoomType.REGISTRAR):
            if candidate_type is None:
                continue
            room = self._first_of_type(candidate_type)
            if room is not None:
                return room

        return self._fallback_room(enrollment_cap)

    def assign_room_for_slot(
        self,
        course: Course,
        enrollment_cap: int,
        slot: TimeSlot | None = None,
        duration: int | None = None,
    ) -> Room:
        """Pick the ideal room, taking restricted-block placements into account.

        A restricted-block placement gets the smallest block room that fits,
        or the largest block room when none fits (flagged downstream as a
        capacity issue). ``duration`` defaults to the course lecture length.
        """
        duration = course.duration if duration is None else duration
        if slot is None or not is_restricted_block(slot, duration):
            return self.assign_room(course, enrollment_cap)

        block_rooms = self.block_rooms
        if not block_rooms:
            return self.assign_room(course, enrollment_cap)

        fitting = [r for r in block_rooms if r.capacity >= enrollment_cap]
        if fitting:
            return min(fitting, key=lambda r: r.capacity)
        return max(block_rooms, key=lambda r: r.capacity)

    def is_room_valid_for_block(self, room: Room, slot: TimeSlot, duration: int) -> bool:
        """Restricted placements need a block room; standard ones must not use one."""
        return is_restricted_block(slot, duration) == self.is_block_room(room)

    def get_available_rooms(
        self,
        slot: TimeSlot,
        placed_sections: Iterable[ScheduledSection],
        min_capacity: int = 0,
    ) -> list[Room]:
        """Rooms not used by any placed section overlapping the slot.

        Args:
            slot: Candidate time slot
            placed_sections: Sections already holding a slot and room
            min_capacity: Minimum room capacity

        Returns:
            Free rooms in catalog order
        """
        occupied = {
            section.room.id
            for section in placed_sections
            if section.room is not None
            and section.time_slot is not None
            and section.time_slot.overlaps(slot)
        }
        return [
            room
            for room in self.rooms
            if room.id not in occupied and room.capacity >= min_capacity
        ]

    def suggest_best_room(
        self,
        course: Course,
        enrollment_cap: int,
        slot: TimeSlot,
        placed_sections: Iterable[ScheduledSection],
        duration: int | None = None,
    ) -> Room | None:
        """Pick a free room for a section in a slot.

        Order: the ideal room if free and large enough, then the smallest
        free fitting room of the same class (block or standard), then the
        smallest free fitting room, then the ideal room even if too small.

        Returns:
            Room, or None if nothing usable is free
        """
        available = self.get_available_rooms(slot, placed_sections)
        if not available:
            return None

        duration = course.duration if duration is None else duration
        ideal = self.assign_room_for_slot(course, enrollment_cap, slot, duration)
        ideal_free = any(room.id == ideal.id for room in available)
        if ideal_free and ideal.capacity >= enrollment_cap:
            return ideal

        fitting = [r for r in available if r.capacity >= enrollment_cap]
        restricted = is_restricted_block(slot, duration)
        same_class = [r for r in fitting if self.is_block_room(r) == restricted]
        if same_class:
            return min(same_class, key=lambda r: r.capacity)
        if fitting:
            return min(fitting, key=lambda r: r.capacity)

        if ideal_free:
            return ideal
        return None
