from __future__ import annotations

import numpy as np
import pygame

from utils.vector_operations import color_to_rgb


class DisplayError(RuntimeError):
    pass


class DisplayWindow:
    """pygame window the renderer draws pixels into as they arrive."""

    def __init__(self, width: int, height: int, title: str = "Ray Tracer") -> None:
        self.width = int(width)
        self.height = int(height)
        try:
            pygame.display.init()
            self.screen = pygame.display.set_mode((self.width, self.height))
        except pygame.error as error:
            pygame.display.quit()
            raise DisplayError(f"Failed to open a {self.width}x{self.height} window: {error}") from error
        pygame.display.set_caption(title)
        self.screen.fill((0, 0, 0))

    def draw_pixel(self, x: int, y: int, color: np.ndarray) -> None:
        self.screen.set_at((int(x), int(y)), color_to_rgb(color))

    def present(self) -> None:
        pygame.display.flip()

    def poll_quit(self) -> bool:
        """Processes pending window events, True once the user closed the window."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return True
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return True
        return False

    def wait_exit(self) -> None:
        clock = pygame.time.Clock()
        while not self.poll_quit():
            clock.tick(30)

    def close(self) -> None:
        pygame.display.quit()

    def __enter__(self) -> DisplayWindow:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
