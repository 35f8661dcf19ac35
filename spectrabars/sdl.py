"""Bar drawing in a desktop window."""

from __future__ import annotations

import os
from typing import Sequence

import pygame

from .colors import RGB, build_gradient, parse_color
from .orientation import Orientation

DRAW_OK = 0
DRAW_RESIZED = -1
DRAW_QUIT = -2

Rect = tuple[int, int, int, int]


def bar_rects(
    bars: Sequence[int],
    bar_width: int,
    bar_spacing: int,
    remainder: int,
    height: int,
    orientation: Orientation,
) -> list[Rect]:
    """Return ``(x, y, w, h)`` for each bar in the given orientation."""
    orientation = Orientation(orientation)
    rects = []
    for index, value in enumerate(bars):
        position = index * (bar_width + bar_spacing) + remainder
        if orientation == Orientation.LEFT:
            rects.append((0, position, value, bar_width))
        elif orientation == Orientation.RIGHT:
            rects.append((height - value, position, value, bar_width))
        elif orientation == Orientation.TOP:
            rects.append((position, 0, bar_width, value))
        else:
            rects.append((position, height - value, bar_width, value))
    return rects


class SdlWindow:
    """A resizable window the bars are painted into."""

    def __init__(
        self, width: int, height: int, x: int = -1, y: int = -1, full_screen: bool = False
    ) -> None:
        if x != -1 and y != -1:
            os.environ["SDL_VIDEO_WINDOW_POS"] = f"{x},{y}"
        pygame.display.init()
        flags = pygame.RESIZABLE
        size = (width, height)
        if full_screen:
            flags |= pygame.FULLSCREEN
            size = (0, 0)
        pygame.display.set_mode(size, flags)
        pygame.display.set_caption("spectrabars")
        self._fg: RGB = (0, 0, 0)
        self._bg: RGB = (0, 0, 0)
        self._gradient: list[RGB] = []

    @staticmethod
    def _surface() -> pygame.Surface:
        surface = pygame.display.get_surface()
        if surface is None:
            raise RuntimeError("the window is not open")
        return surface

    def init_surface(
        self, fg_color: str, bg_color: str, gradient: bool, gradient_colors: Sequence[str]
    ) -> tuple[int, int]:
        """Set the colors, clear the window and return its ``(width, height)``."""
        surface = self._surface()
        width, height = surface.get_size()

        self._bg = parse_color(bg_color) or self._bg
        surface.fill(self._fg)
        self._fg = parse_color(fg_color) or self._fg

        self._gradient = build_gradient(gradient_colors, height) if gradient else []
        return width, height

    def draw(
        self,
        bars: Sequence[int],
        previous_frame: Sequence[int],
        bar_width: int,
        bar_spacing: int,
        remainder: int,
        height: int,
        frame_time: int,
        orientation: Orientation,
        gradient: bool,
    ) -> int:
        """Paint one frame if it changed, wait ``frame_time`` ms and handle events.

        Returns DRAW_OK, DRAW_RESIZED when the window changed size, or DRAW_QUIT
        when the user asked to leave.
        """
        if list(bars) != list(previous_frame[: len(bars)]):
            surface = self._surface()
            surface.fill(self._bg)
            if gradient and self._gradient:
                for line in range(height):
                    color = self._gradient[min(line, len(self._gradient) - 1)]
                    for index, value in enumerate(bars):
                        if value > line:
                            x1 = 0 if index == 0 else index * (bar_width + bar_spacing)
                            row = height - line
                            pygame.draw.line(surface, color, (x1, row), (x1 + bar_width, row))
            else:
                for rect in bar_rects(bars, bar_width, bar_spacing, remainder, height, orientation):
                    surface.fill(self._fg, pygame.Rect(rect))
            pygame.display.flip()

        pygame.time.delay(max(int(frame_time), 0))

        result = DRAW_OK
        for event in pygame.event.get():
            if event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
                result = DRAW_RESIZED
                if gradient:
                    self._gradient = []
            if event.type == pygame.KEYDOWN and event.key in (pygame.K_q, pygame.K_ESCAPE):
                result = DRAW_QUIT
            if event.type == pygame.QUIT:
                result = DRAW_QUIT
        return result

    def cleanup(self) -> None:
        """Close the window."""
        pygame.display.quit()
        pygame.quit()