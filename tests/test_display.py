"""Tests for the pygame preview window, run against SDL's dummy video driver."""

import numpy as np
import pytest

pygame = pytest.importorskip("pygame")

from display import DisplayError, DisplayWindow  # noqa: E402


@pytest.fixture
def window(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    display_window = DisplayWindow(8, 6, "test")
    yield display_window
    display_window.close()


class TestDisplayWindow:
    """Tests for DisplayWindow."""

    def test_window_size(self, window):
        assert window.screen.get_size() == (8, 6)

    def test_draw_pixel(self, window):
        window.draw_pixel(2, 3, np.array([1.0, 0.5, 0.0]))
        window.present()
        assert tuple(window.screen.get_at((2, 3)))[:3] == (255, 128, 0)

    def test_poll_quit_without_events(self, window):
        assert window.poll_quit() is False

    def test_poll_quit_on_close_event(self, window):
        pygame.event.post(pygame.event.Event(pygame.QUIT))
        assert window.poll_quit() is True

    def test_poll_quit_on_escape(self, window):
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        assert window.poll_quit() is True


class TestDisplayWindowFailure:
    """A window that cannot be created leaves pygame's display shut down."""

    def test_set_mode_failure_quits_display(self, monkeypatch):
        monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")

        def failing_set_mode(size):
            raise pygame.error("no video mode")

        monkeypatch.setattr(pygame.display, "set_mode", failing_set_mode)
        with pytest.raises(DisplayError, match="no video mode"):
            DisplayWindow(8, 6, "test")
        assert not pygame.display.get_init()
