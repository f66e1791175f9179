"""Flat-rectangle renderer. Reads the Simulation, never mutates it."""

import pygame

from world_weaver import ui_layout
from world_weaver.controls import interior_origin
from world_weaver.fonts import get_font
from world_weaver.settings import (
    COLOR_BACKGROUND,
    COLOR_BUILDING,
    COLOR_BUTTON,
    COLOR_DOOR,
    COLOR_HP_BAR,
    COLOR_INTERIOR,
    COLOR_MONEY_TEXT,
    COLOR_OBSTACLE,
    COLOR_PANEL_BG,
    COLOR_PICKUP,
    COLOR_PLAYER,
    COLOR_TEXT,
    COLOR_TEXT_DIM,
    PLAYER_HALF_EXTENT,
    SAFE_BOTTOM,
)

NPC_RADIUS = 14
PICKUP_RADIUS_PX = 8


def _hue_color(index: int, lightness: int = 55, alpha: int = 100) -> pygame.Color:
    color = pygame.Color(0, 0, 0)
    color.hsla = ((index * 60) % 360, 60, lightness, alpha)
    return color


def _rect(r) -> pygame.Rect:
    return pygame.Rect(int(r.x), int(r.y), int(r.width), int(r.height))


def draw_world(screen, sim):
    bottom = int(sim.world_bottom)
    font = get_font(20)
    for i, zone in enumerate(sim.zones):
        tint = pygame.Surface((max(1, int(zone.width)), bottom), pygame.SRCALPHA)
        tint.fill(_hue_color(i, lightness=25, alpha=15))
        screen.blit(tint, (int(zone.x), 0))
        screen.blit(font.render(zone.name, True, COLOR_TEXT_DIM), (int(zone.x) + 12, 12))

    for obstacle in sim.obstacles:
        pygame.draw.rect(screen, COLOR_OBSTACLE, _rect(obstacle))
    for building in sim.buildings:
        pygame.draw.rect(screen, COLOR_BUILDING, _rect(building))
        pygame.draw.rect(screen, COLOR_DOOR, _rect(building.door_rect()))
    for obj in sim.objects:
        pygame.draw.circle(screen, COLOR_PICKUP, (int(obj.x), int(obj.y)), PICKUP_RADIUS_PX)
    for i, npc in enumerate(sim.npcs):
        pygame.draw.circle(screen, _hue_color(i), (int(npc.x), int(npc.y)), NPC_RADIUS)
    pygame.draw.circle(screen, COLOR_PLAYER, (int(sim.player.x), int(sim.player.y)),
                       PLAYER_HALF_EXTENT)


def draw_interior(screen, sim):
    interior = sim.current_interior
    ox, oy = interior_origin(sim)
    room = pygame.Rect(int(ox - interior.width / 2), int(oy - interior.height / 2),
                       int(interior.width), int(interior.height))
    pygame.draw.rect(screen, COLOR_INTERIOR, room)
    pygame.draw.rect(screen, COLOR_BUTTON, room, 4)
    door = interior.door_rect()
    pygame.draw.rect(screen, COLOR_DOOR, pygame.Rect(int(ox + door.x), int(oy + door.y),
                                                     int(door.width), int(door.height)))
    occupant = interior.occupant
    if occupant is not None:
        index = next((i for i, n in enumerate(sim.npcs) if n.id == occupant.id), 0)
        pygame.draw.circle(screen, _hue_color(index),
                           (int(ox + occupant.x), int(oy + occupant.y)), NPC_RADIUS)
        title = get_font(24).render(f"{occupant.display_name}'s Home", True, COLOR_TEXT)
        screen.blit(title, (room.x + 16, room.y + 12))
    pygame.draw.circle(screen, COLOR_PLAYER, (int(ox + sim.player.x), int(oy + sim.player.y)),
                       PLAYER_HALF_EXTENT)


def draw_hud(screen, sim):
    p = sim.player
    font = get_font(18)
    bar_x, bar_y, bar_w, bar_h = 12, 12, 200, 12
    ratio = max(0.0, p.hp / p.max_hp) if p.max_hp > 0 else 0
    pygame.draw.rect(screen, COLOR_BUTTON, (bar_x, bar_y, bar_w, bar_h))
    pygame.draw.rect(screen, COLOR_HP_BAR, (bar_x, bar_y, int(bar_w * ratio), bar_h))
    pygame.draw.rect(screen, (68, 68, 68), (bar_x, bar_y, bar_w, bar_h), 1)
    screen.blit(font.render(f"HP {p.hp}/{p.max_hp}", True, COLOR_TEXT), (bar_x + 4, bar_y))
    screen.blit(font.render(f"Gold: {p.gold}", True, COLOR_MONEY_TEXT), (bar_x, bar_y + 18))


def draw_messages(screen, sim):
    font = get_font(20)
    y = 80
    for text in sim.messages.texts():
        strip = pygame.Surface((sim.screen_width, 20), pygame.SRCALPHA)
        strip.fill((0, 0, 0, 150))
        screen.blit(strip, (0, y - 2))
        screen.blit(font.render(text, True, COLOR_TEXT), (20, y))
        y += 22


def draw_elements(screen, elements):
    for element in elements:
        rect = _rect(element.rect)
        if element.style in ("button", "box"):
            pygame.draw.rect(screen, COLOR_BUTTON, rect)
        if not element.text:
            continue
        if element.style == "title":
            surf = get_font(26).render(element.text, True, COLOR_TEXT)
        elif element.style == "dim":
            surf = get_font(18).render(element.text, True, COLOR_TEXT_DIM)
        else:
            surf = get_font(20).render(element.text, True, COLOR_TEXT)
        if element.style == "button":
            screen.blit(surf, (rect.x + 8, rect.y + (rect.height - surf.get_height()) // 2))
        else:
            screen.blit(surf, (rect.x, rect.y))


def draw_panel(screen, panel):
    bg = pygame.Surface((int(panel.rect.width), int(panel.rect.height)), pygame.SRCALPHA)
    bg.fill(COLOR_PANEL_BG)
    screen.blit(bg, (int(panel.rect.x), int(panel.rect.y)))
    draw_elements(screen, panel.elements)


def draw(screen, sim):
    screen.fill(COLOR_BACKGROUND)
    if sim.in_interior:
        draw_interior(screen, sim)
    else:
        draw_world(screen, sim)

    band = pygame.Rect(0, sim.screen_height - SAFE_BOTTOM, sim.screen_width, SAFE_BOTTOM)
    pygame.draw.rect(screen, COLOR_INTERIOR, band)
    draw_elements(screen, ui_layout.bottom_bar(sim))
    draw_hud(screen, sim)

    talk = ui_layout.talk_panel(sim)
    if talk is not None:
        shade = pygame.Surface((sim.screen_width, sim.screen_height), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 128))
        screen.blit(shade, (0, 0))
        draw_panel(screen, talk)
    overlay = ui_layout.overlay_panel(sim)
    if overlay is not None:
        draw_panel(screen, overlay)
    draw_messages(screen, sim)
