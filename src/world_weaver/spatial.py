"""Zones, obstacles, buildings and interiors, plus axis-aligned collision.

World space runs from (0, 0) at the top-left to (world_width, world_bottom),
where world_bottom leaves room for the UI band at the bottom of the screen.
Interiors use their own space with the origin at the centre of the room.
"""
from __future__ import annotations

from dataclasses import dataclass

from world_weaver.settings import (
    BUILDING_BUCKET_WIDTH,
    BUILDING_HEIGHT_FRACTION,
    BUILDING_MIN_SIZE,
    BUILDING_PLACEMENT_ATTEMPTS,
    BUILDING_ZONE_FRACTION,
    DOOR_HEIGHT,
    DOOR_WIDTH_FRACTION,
    INTERIOR_MAX_HEIGHT,
    INTERIOR_MAX_WIDTH,
    INTERIOR_SPAWN_INSET,
    OBSTACLE_MIN_SIZE,
    OBSTACLE_SIZE_SPAN,
    OBSTACLES_PER_ZONE,
    PLAYER_HALF_EXTENT,
    SAFE_BOTTOM,
)


def world_bottom(screen_height: float) -> float:
    """Lowest walkable y in world space."""
    return screen_height - SAFE_BOTTOM


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, px: float, py: float) -> bool:
        """Inclusive point test, used for pointer hits."""
        return self.x <= px <= self.right and self.y <= py <= self.bottom

    def overlaps_box(self, cx: float, cy: float, half: float) -> bool:
        """Strict overlap with a square box centred on (cx, cy)."""
        return (cx + half > self.x and cx - half < self.right
                and cy + half > self.y and cy - half < self.bottom)


@dataclass
class Zone:
    id: str
    name: str
    x: float = 0.0
    width: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width


def layout_zones(zones: list[Zone], world_width: float) -> None:
    """Split *world_width* evenly across *zones*, left to right, in place."""
    count = len(zones)
    if count == 0:
        return
    width = world_width / count
    for i, zone in enumerate(zones):
        zone.x = width * i
        zone.width = width
    # Pin the last edge so the widths sum exactly to the world width
    zones[-1].width = world_width - zones[-1].x


def build_zones(zone_defs, world_width: float) -> list[Zone]:
    """Create laid-out zones; an empty spec yields one zone covering the world."""
    zones = [Zone(id=z.id, name=z.name) for z in zone_defs]
    if not zones:
        zones = [Zone(id="wilds", name="The Wilds")]
    layout_zones(zones, world_width)
    return zones


@dataclass
class Obstacle(Rect):
    zone_index: int = 0


@dataclass
class Building(Rect):
    id: str = ""
    npc_id: str = ""
    zone_index: int = 0
    door_x: float = 0.0
    door_y: float = 0.0

    def door_rect(self) -> Rect:
        """Clickable door area sitting on the bottom edge."""
        door_w = self.width * DOOR_WIDTH_FRACTION
        return Rect(self.door_x - door_w / 2, self.door_y - DOOR_HEIGHT, door_w, DOOR_HEIGHT)

    def in_door_band(self, cx: float, cy: float, half: float) -> bool:
        """True when an actor box is passing through the door gap."""
        door_w = self.width * DOOR_WIDTH_FRACTION
        return (self.door_x - door_w / 2 < cx < self.door_x + door_w / 2
                and cy + half > self.bottom)


def _push_out(cx: float, cy: float, half: float, rect: Rect) -> tuple[float, float]:
    """Move the box out of *rect* along the axis of least penetration."""
    dx_left = rect.x - (cx + half)
    dx_right = rect.right - (cx - half)
    dy_top = rect.y - (cy + half)
    dy_bottom = rect.bottom - (cy - half)
    abs_x = min(abs(dx_left), abs(dx_right))
    abs_y = min(abs(dy_top), abs(dy_bottom))
    if abs_x < abs_y:
        if abs(dx_left) < abs(dx_right):
            cx = rect.x - half
        else:
            cx = rect.right + half
    else:
        if abs(dy_top) < abs(dy_bottom):
            cy = rect.y - half
        else:
            cy = rect.bottom + half
    return cx, cy


def resolve_collisions(cx: float, cy: float, obstacles, buildings,
                       half: float = PLAYER_HALF_EXTENT,
                       door_predicate=None) -> tuple[float, float]:
    """Return the corrected centre of a box after one pass over all blockers.

    *door_predicate(building, cx, cy, half)* exempts a building from push-out;
    it defaults to the building's door band.
    """
    if door_predicate is None:
        def door_predicate(building, x, y, h):
            return building.in_door_band(x, y, h)

    for obstacle in obstacles:
        if obstacle.overlaps_box(cx, cy, half):
            cx, cy = _push_out(cx, cy, half, obstacle)
    for building in buildings:
        if building.overlaps_box(cx, cy, half) and not door_predicate(building, cx, cy, half):
            cx, cy = _push_out(cx, cy, half, building)
    return cx, cy


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class Interior:
    """A building's inside. Coordinates are relative to the room centre."""
    id: str
    npc_id: str
    width: float
    height: float
    occupant: object = None  # the NPC actor living here
    wall_padding: float = PLAYER_HALF_EXTENT

    @property
    def spawn(self) -> tuple[float, float]:
        return 0.0, self.height / 2 - INTERIOR_SPAWN_INSET

    def door_rect(self) -> Rect:
        door_w = self.width * DOOR_WIDTH_FRACTION
        return Rect(-door_w / 2, self.height / 2 - DOOR_HEIGHT, door_w, DOOR_HEIGHT)

    def bounds(self, inset: float) -> tuple[float, float, float, float]:
        """(min_x, max_x, min_y, max_y) shrunk by *inset* on every side."""
        hw, hh = self.width / 2, self.height / 2
        return -hw + inset, hw - inset, -hh + inset, hh - inset

    def clamp_point(self, x: float, y: float) -> tuple[float, float]:
        min_x, max_x, min_y, max_y = self.bounds(self.wall_padding)
        return clamp(x, min_x, max_x), clamp(y, min_y, max_y)


def interior_size(screen_width: float, screen_height: float) -> tuple[float, float]:
    return (min(screen_width - 100, INTERIOR_MAX_WIDTH),
            min(screen_height - SAFE_BOTTOM - 100, INTERIOR_MAX_HEIGHT))


def build_obstacles(zones: list[Zone], screen_height: float, rng) -> list[Obstacle]:
    obstacles = []
    span_h = screen_height - SAFE_BOTTOM
    for zi, zone in enumerate(zones):
        for _ in range(OBSTACLES_PER_ZONE):
            w = OBSTACLE_MIN_SIZE + rng.random() * OBSTACLE_SIZE_SPAN
            h = OBSTACLE_MIN_SIZE + rng.random() * OBSTACLE_SIZE_SPAN
            ox = zone.x + 30 + rng.random() * max(0.0, zone.width - w - 60)
            oy = 140 + rng.random() * max(0.0, span_h - h - 200)
            obstacles.append(Obstacle(ox, oy, w, h, zone_index=zi))
    return obstacles


def build_buildings(npcs, zones: list[Zone], screen_height: float, rng) -> list[Building]:
    """Give every NPC a house in its home zone, door on the bottom edge."""
    buildings = []
    used_buckets: set[tuple[int, int]] = set()
    span_h = screen_height - SAFE_BOTTOM
    for idx, npc in enumerate(npcs):
        if not 0 <= npc.zone_index < len(zones):
            continue
        zone = zones[npc.zone_index]
        bw = max(BUILDING_MIN_SIZE, zone.width * BUILDING_ZONE_FRACTION)
        bh = max(BUILDING_MIN_SIZE, screen_height * BUILDING_HEIGHT_FRACTION)
        bx = None
        for _ in range(BUILDING_PLACEMENT_ATTEMPTS):
            candidate = zone.x + 30 + rng.random() * max(0.0, zone.width - bw - 60)
            bucket = (npc.zone_index, int(candidate // BUILDING_BUCKET_WIDTH))
            if bucket not in used_buckets:
                used_buckets.add(bucket)
                bx = candidate
                break
        if bx is None:
            bx = zone.x + (zone.width - bw) / 2
        by = 120 + rng.random() * max(0.0, span_h - bh - 180)
        buildings.append(Building(
            bx, by, bw, bh,
            id=f"building_{idx}",
            npc_id=npc.id,
            zone_index=npc.zone_index,
            door_x=bx + bw / 2,
            door_y=by + bh,
        ))
    return buildings
