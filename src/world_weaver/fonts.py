"""Cached font loading."""
import pygame

_cache: dict[int, pygame.font.Font] = {}


def get_font(size: int) -> pygame.font.Font:
    """Return the default system font at *size*, loading it once."""
    if size not in _cache:
        _cache[size] = pygame.font.SysFont(None, size)
    return _cache[size]
