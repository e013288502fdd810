"""
Pygame live viewer for the grid solve.

Blits frames rendered by ``ArmTableEnv.render()`` to a window and overlays
the tick count, the target being solved, and the grid progress.  Pygame
is imported lazily so the rest of the package works without it.

Classes:
    SimViewer: Live rendering window.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from grippr_sim.utils.constants import COLOR_TEXT, DEFAULT_FPS


@dataclass
class SimViewer:
    """Pygame-based viewer for ``ArmTableEnv`` frames.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        fps: Frame-rate cap; 0 runs uncapped.
        window_title: Caption displayed in the title bar.
    """

    width: int = 1280
    height: int = 640
    fps: int = DEFAULT_FPS
    window_title: str = "grippr"
    _screen: Optional[Any] = None
    _clock: Optional[Any] = None

    # ------------------------------------------------------------------
    # Initialisation / teardown
    # ------------------------------------------------------------------

    def init_display(self) -> None:
        """Create the Pygame window and clock.

        Raises:
            ImportError: If Pygame is not installed.
        """
        try:
            import pygame
        except ImportError as exc:
            raise ImportError("Pygame required: pip install pygame") from exc
        pygame.init()
        self._screen = pygame.display.set_mode((self.width, self.height))
        pygame.display.set_caption(self.window_title)
        self._clock = pygame.time.Clock()

    def close(self) -> None:
        """Destroy the Pygame window if one was opened."""
        if self._screen is None:
            return
        import pygame

        pygame.quit()
        self._screen = None
        self._clock = None

    # ------------------------------------------------------------------
    # Live rendering
    # ------------------------------------------------------------------

    def _image_to_surface(self, image: np.ndarray) -> Any:
        """Convert an (H, W, 3) uint8 NumPy image to a scaled Pygame surface.

        Args:
            image: RGB image array.

        Returns:
            A Pygame ``Surface`` the size of the window.
        """
        import pygame

        surface = pygame.surfarray.make_surface(np.transpose(image, (1, 0, 2)))
        return pygame.transform.scale(surface, (self.width, self.height))

    def _draw_hud_text(self, text: str, y_offset: int) -> None:
        """Draw a single line of HUD text at the given y-offset."""
        import pygame

        font = pygame.font.SysFont("monospace", 16)
        rendered = font.render(text, True, COLOR_TEXT)
        self._screen.blit(rendered, (8, y_offset))

    def _draw_hud(self, tick: int, info: Dict[str, Any], progress: Dict[str, int]) -> None:
        """Draw the heads-up display overlay.

        Args:
            tick: Ticks spent so far.
            info: Info dictionary returned by ``ArmTableEnv.step``.
            progress: Output of ``TargetGridScheduler.progress()``.
        """
        self._draw_hud_text(f"Tick: {tick}", 4)
        self._draw_hud_text(
            f"Target: {info.get('target_index', -1) + 1}/{progress['total']}"
            f" ({info.get('state')})",
            22,
        )
        self._draw_hud_text(
            f"Refined: {progress['refined']}  Unsolved: {progress['unsolved']}", 40
        )
        if info.get("completed"):
            self._draw_hud_text("Grid complete", 58)

    def render_frame(
        self,
        image: np.ndarray,
        tick: int,
        info: Dict[str, Any],
        progress: Dict[str, int],
    ) -> bool:
        """Blit one frame to the window with HUD overlay.

        Args:
            image: (H, W, 3) uint8 RGB image.
            tick: Ticks spent so far.
            info: Info dictionary of the last step.
            progress: Grid progress counts.

        Returns:
            True if still running, False if the user closed the window.
        """
        if self._screen is None:
            self.init_display()
        self._screen.blit(self._image_to_surface(image), (0, 0))
        self._draw_hud(tick, info, progress)
        return self._flip_display()

    def _pump_events(self) -> bool:
        """Process Pygame events; False on quit or Escape."""
        import pygame

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def _flip_display(self) -> bool:
        """Update the display, pump events, and tick the clock.

        Returns:
            True if still running, False if the user closed the window.
        """
        import pygame

        pygame.display.flip()
        alive = self._pump_events()
        if self._clock is not None:
            self._clock.tick(self.fps)
        return alive
