"""
Desktop wheel window using pygame.

The window loop is the frame clock: once per display refresh it ticks the
FrameTicker (advancing the spin engine), then redraws the wheel from the
engine's current rotation.
"""

import asyncio
import logging
import math
from dataclasses import dataclass

import pygame

from ..animation.ticker import FrameTicker
from ..core.events import Event, EventType, button_press_event, dismiss_event, speed_change_event
from ..core.state import SpinPhase
from ..graphics.primitives import create_buffer
from ..graphics.wheel import PLACEHOLDER_TEXT, WheelStyle, layout_labels, render_wheel
from ..session import WheelSession
from ..settings import SPEED_LEVELS

logger = logging.getLogger(__name__)


@dataclass
class WindowConfig:
    """Window configuration."""
    width: int = 900
    height: int = 640
    wheel_size: int = 520
    title: str = "Spin Wheel"
    fullscreen: bool = False
    fps: int = 60

    # Colors
    bg_color: tuple[int, int, int] = (20, 20, 30)
    panel_color: tuple[int, int, int] = (40, 40, 50)
    text_color: tuple[int, int, int] = (200, 200, 220)
    accent_color: tuple[int, int, int] = (100, 150, 255)
    winner_color: tuple[int, int, int] = (255, 215, 0)


class SimulatorWindow:
    """
    Wheel window with keyboard controls.

    Keyboard Mapping:
        SPACE / RETURN: Spin / Stop / Spin again
        ESC: Dismiss winner
        CTRL+V: Add one item per pasted line
        DELETE: Remove winning item
        R: Randomize slice order
        A: Add item
        X: Toggle remove-winning-slice mode
        1 / 2 / 3: Slow / normal / fast speed
        Q: Quit
    """

    SPEED_KEYS = {
        pygame.K_1: "slow",
        pygame.K_2: "normal",
        pygame.K_3: "fast",
    }

    def __init__(
        self,
        session: WheelSession,
        ticker: FrameTicker,
        config: WindowConfig | None = None,
    ) -> None:
        self.config = config or WindowConfig()
        self.session = session
        self.ticker = ticker
        self.event_bus = session.event_bus

        self._style = WheelStyle(background=self.config.bg_color)
        self._wheel_buffer = create_buffer(
            self.config.wheel_size, self.config.wheel_size, self.config.bg_color
        )

        # Pygame setup
        self._screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._running = False
        self._frame_count = 0

        # Fonts
        self._font: pygame.font.Font | None = None
        self._small_font: pygame.font.Font | None = None
        self._label_font: pygame.font.Font | None = None

        logger.info("SimulatorWindow created")

    def _init_pygame(self) -> None:
        """Initialize pygame and create window."""
        pygame.init()
        pygame.display.set_caption(self.session.title or self.config.title)

        flags = pygame.DOUBLEBUF
        if self.config.fullscreen:
            flags |= pygame.FULLSCREEN

        self._screen = pygame.display.set_mode(
            (self.config.width, self.config.height),
            flags
        )
        self._clock = pygame.time.Clock()

        pygame.font.init()
        self._font = pygame.font.SysFont("DejaVu Sans", 20)
        self._small_font = pygame.font.SysFont("DejaVu Sans", 14)
        self._label_font = pygame.font.SysFont("DejaVu Sans", 16, bold=True)

        logger.info(f"Pygame initialized: {self.config.width}x{self.config.height}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event)

    def _handle_keydown(self, event: pygame.event.Event) -> None:
        """Handle key press."""
        key = event.key

        if key == pygame.K_q:
            self._running = False

        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self.event_bus.queue_event(button_press_event(source="keyboard"))
        elif key == pygame.K_ESCAPE:
            self.event_bus.queue_event(dismiss_event())
        elif key == pygame.K_DELETE:
            self.event_bus.queue_event(Event(EventType.REMOVE_WINNER, source="keyboard"))
        elif key == pygame.K_v and event.mod & pygame.KMOD_CTRL:
            self._paste_items()
        elif key == pygame.K_r:
            self.event_bus.queue_event(Event(EventType.RANDOMIZE, source="keyboard"))

        elif key in self.SPEED_KEYS:
            level = SPEED_LEVELS[self.SPEED_KEYS[key]]
            self.event_bus.queue_event(speed_change_event(spin=level, stop=level))

        # Configuration edits (idle only)
        elif key == pygame.K_a and self.session.can_edit:
            self.session.config.add_item()
        elif key == pygame.K_x and self.session.can_edit:
            self.session.remove_winning_slice = not self.session.remove_winning_slice

    def _paste_items(self) -> None:
        """Add the clipboard text as items, one per line."""
        text = pygame.scrap.get_text()
        if not text:
            logger.info("Clipboard is empty")
            return
        added = self.session.add_items_from_text(text)
        logger.info(f"Pasted {len(added)} items")

    def _render(self) -> None:
        """Render all UI elements."""
        if not self._screen:
            return

        self._screen.fill(self.config.bg_color)
        self._render_wheel()
        self._render_panel()
        self._render_winner()
        pygame.display.flip()

    def _render_wheel(self) -> None:
        """Rasterize the wheel and draw slice labels over it."""
        slices = self.session.slices
        angle = self.session.engine.rotation_angle
        geo = render_wheel(self._wheel_buffer, slices, angle, self._style)

        surface = pygame.surfarray.make_surface(self._wheel_buffer.swapaxes(0, 1))
        origin = (20, (self.config.height - self.config.wheel_size) // 2)
        self._screen.blit(surface, origin)

        if not self._label_font:
            return

        if not slices:
            text = self._label_font.render(PLACEHOLDER_TEXT, True, (107, 114, 128))
            rect = text.get_rect(center=(origin[0] + geo.cx, origin[1] + geo.cy))
            self._screen.blit(text, rect)
            return

        for label in layout_labels(slices, angle, geo, self._style):
            text = self._label_font.render(label.text, True, (255, 255, 255))
            # pygame rotates counter-clockwise; screen angles run clockwise
            text = pygame.transform.rotate(text, -math.degrees(label.rotation))
            rect = text.get_rect(center=(origin[0] + label.x, origin[1] + label.y))
            self._screen.blit(text, rect)

    def _render_panel(self) -> None:
        """Item list, win counts, speed and controls."""
        if not self._font or not self._small_font:
            return

        x = self.config.wheel_size + 50
        y = 30
        session = self.session

        title = self._font.render(session.title, True, self.config.accent_color)
        self._screen.blit(title, (x, y))
        y += 40

        button = self._font.render(f"[ {session.button_label} ]", True, self.config.text_color)
        self._screen.blit(button, (x, y))
        y += 40

        for item in session.config.items:
            wins = session.win_count(item.id)
            line = f"{item.name}  x{item.weight}"
            if wins:
                line += f"  ({wins} win{'s' if wins != 1 else ''})"
            surface = self._small_font.render(line, True, self.config.text_color)
            self._screen.blit(surface, (x, y))
            y += 20

        recent = session.recent_winners()
        if recent:
            y += 10
            surface = self._small_font.render("Last: " + ", ".join(recent), True, self.config.winner_color)
            self._screen.blit(surface, (x, y))
            y += 20

        y += 20
        engine = session.engine
        lines = [
            f"Speed x{engine.speed_multiplier:g}  Stop x{engine.stop_speed_multiplier:g}",
            f"Remove winning slice: {'on' if session.remove_winning_slice else 'off'}",
            "",
            "SPACE spin/stop  ESC close  DEL remove",
            "R shuffle  A add  CTRL+V paste list",
            "X remove-slice mode",
            "1/2/3 speed  Q quit",
        ]
        for line in lines:
            surface = self._small_font.render(line, True, (140, 140, 160))
            self._screen.blit(surface, (x, y))
            y += 18

    def _render_winner(self) -> None:
        """Winner banner while stopped."""
        winner = self.session.winner
        if self.session.phase != SpinPhase.STOPPED or winner is None or not self._font:
            return

        text = self._font.render(f"The winner is {winner.name}!", True, self.config.winner_color)
        rect = text.get_rect(midbottom=(self.config.width // 2, self.config.height - 20))
        pygame.draw.rect(self._screen, self.config.panel_color, rect.inflate(24, 12), border_radius=8)
        self._screen.blit(text, rect)

    async def run(self) -> None:
        """Main window loop."""
        self._init_pygame()
        self._running = True

        logger.info("Simulator started")

        while self._running:
            # Handle events
            self._handle_events()

            # Advance the spin animation by one frame
            self.ticker.tick()

            # Apply queued input
            self.event_bus.process_queue()

            # Render
            self._render()

            # Frame timing
            if self._clock:
                self._clock.tick(self.config.fps)

            self._frame_count += 1

            # Yield to other tasks
            await asyncio.sleep(0)

        self._cleanup()

    def _cleanup(self) -> None:
        """Clean up pygame resources."""
        self.session.close()
        pygame.quit()
        logger.info("Simulator stopped")
