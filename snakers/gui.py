"""Playable snake window with a human or trained-agent player."""

from __future__ import annotations

import argparse
import enum
import sys
from collections.abc import Sequence

import pygame

from snakers.agent import Agent
from snakers.game import Game, Vec2

SCORE_AREA_HEIGHT = 60
SCORE_TEXT_SIZE = 40
CELL_SIZE = 30
GAME_WIDTH = 27
GAME_HEIGHT = 21
BASE_TICK_SPEED = 0.2
TICK_INCREASE_RATE = 0.05
AGENT_TICK_SPEED = 0.05
MIN_TICK_SPEED = 0.05
CELL_BORDER = 2

BACKGROUND_COLOR = (245, 245, 245)
SCORE_AREA_COLOR = (25, 25, 51)
GRID_COLOR = (102, 102, 102, 77)
TARGET_BORDER_COLOR = (128, 0, 0)
TARGET_COLOR = (230, 41, 55)
SNAKE_BORDER_COLOR = (0, 117, 44)
SNAKE_COLOR = (0, 228, 48)
BUTTON_COLOR = (80, 80, 100)
BUTTON_HOVER_COLOR = (100, 100, 120)
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

_KEY_DIRECTIONS: dict[int, Vec2] = {
    pygame.K_UP: (0, -1),
    pygame.K_w: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_s: (0, 1),
    pygame.K_RIGHT: (1, 0),
    pygame.K_d: (1, 0),
    pygame.K_LEFT: (-1, 0),
    pygame.K_a: (-1, 0),
}


class Mode(enum.Enum):
    MENU = enum.auto()
    HUMAN = enum.auto()
    AGENT = enum.auto()


def tick_interval(score: int) -> float:
    """Seconds between ticks for a human player; shrinks as the score grows."""
    interval = 1.0 / ((1.0 / BASE_TICK_SPEED) * (1.0 + score * TICK_INCREASE_RATE))
    return max(interval, MIN_TICK_SPEED)


def key_to_direction(key: int) -> Vec2 | None:
    """The heading for an arrow or WASD key, or None for any other key."""
    return _KEY_DIRECTIONS.get(key)


def _draw_cell(surface, x: float, y: float, width: float, height: float, border, fill) -> None:
    outer = pygame.Rect(int(x), int(y), int(width - 1), int(height - 1))
    pygame.draw.rect(surface, border, outer)
    pygame.draw.rect(surface, fill, outer.inflate(-2 * CELL_BORDER, -2 * CELL_BORDER))


def draw_game(surface: pygame.Surface, game: Game, font: pygame.font.Font) -> None:
    """Draw the score bar, the grid, the food and the snake."""
    screen_w, screen_h = surface.get_size()
    surface.fill(BACKGROUND_COLOR)

    pygame.draw.rect(surface, SCORE_AREA_COLOR, pygame.Rect(0, 0, screen_w, SCORE_AREA_HEIGHT))
    pygame.draw.line(surface, BLACK, (0, SCORE_AREA_HEIGHT), (screen_w, SCORE_AREA_HEIGHT), 2)
    text = font.render(f"Score: {game.score}", True, WHITE)
    surface.blit(text, text.get_rect(center=(screen_w / 2, SCORE_AREA_HEIGHT / 2)))

    area_y = SCORE_AREA_HEIGHT
    cell_w = screen_w / game.width
    cell_h = (screen_h - area_y) / game.height

    overlay = pygame.Surface((screen_w, screen_h), pygame.SRCALPHA)
    for i in range(1, game.width):
        x = i * cell_w
        pygame.draw.line(overlay, GRID_COLOR, (x, area_y), (x, screen_h), 1)
    for i in range(1, game.height):
        y = area_y + i * cell_h
        pygame.draw.line(overlay, GRID_COLOR, (0, y), (screen_w, y), 1)
    surface.blit(overlay, (0, 0))

    if game.target is not None:
        tx, ty = game.target
        _draw_cell(
            surface, tx * cell_w, area_y + ty * cell_h, cell_w, cell_h,
            TARGET_BORDER_COLOR, TARGET_COLOR,
        )
    for sx, sy in game.snake:
        _draw_cell(
            surface, sx * cell_w, area_y + sy * cell_h, cell_w, cell_h,
            SNAKE_BORDER_COLOR, SNAKE_COLOR,
        )


class Button:
    """A labelled rectangle that lights up under the mouse."""

    def __init__(self, x: float, y: float, width: float, height: float, text: str) -> None:
        self.rect = pygame.Rect(int(x), int(y), int(width), int(height))
        self.text = text

    def draw(self, surface: pygame.Surface, font: pygame.font.Font, mouse_pos) -> bool:
        """Draw the button; returns whether the mouse is over it."""
        hovered = bool(self.rect.collidepoint(mouse_pos))
        pygame.draw.rect(surface, BUTTON_HOVER_COLOR if hovered else BUTTON_COLOR, self.rect)
        label = font.render(self.text, True, WHITE)
        surface.blit(label, label.get_rect(center=self.rect.center))
        return hovered

    def is_clicked(self, event: pygame.event.Event) -> bool:
        """Whether ``event`` is a left click inside the button."""
        return (
            event.type == pygame.MOUSEBUTTONDOWN
            and getattr(event, "button", None) == 1
            and bool(self.rect.collidepoint(event.pos))
        )


def _menu_buttons(surface: pygame.Surface) -> tuple[Button, Button]:
    center_x = surface.get_width() / 2
    center_y = surface.get_height() / 2
    width, height, spacing = 250, 60, 20
    human = Button(center_x - width / 2, center_y - height - spacing / 2, width, height, "Human Player")
    agent = Button(center_x - width / 2, center_y + spacing / 2, width, height, "AI")
    return human, agent


def _draw_menu(surface, title_font, button_font, buttons) -> None:
    surface.fill(BACKGROUND_COLOR)
    center_x = surface.get_width() / 2
    center_y = surface.get_height() / 2
    title = title_font.render("Select Player", True, BLACK)
    surface.blit(title, title.get_rect(midbottom=(center_x, center_y - 100)))
    mouse = pygame.mouse.get_pos()
    for button in buttons:
        button.draw(surface, button_font, mouse)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Play snake, or watch an agent play.")
    parser.add_argument("--model", default="input/snake_agent.bin", help="trained agent to load")
    args = parser.parse_args(argv)

    try:
        agent = Agent.load(args.model)
    except (OSError, ValueError) as exc:
        print(f"cannot load agent: {exc}", file=sys.stderr)
        return 1

    pygame.init()
    try:
        screen = pygame.display.set_mode(
            (GAME_WIDTH * CELL_SIZE, SCORE_AREA_HEIGHT + GAME_HEIGHT * CELL_SIZE)
        )
        pygame.display.set_caption("snake")
        clock = pygame.time.Clock()
        score_font = pygame.font.Font(None, SCORE_TEXT_SIZE)
        title_font = pygame.font.Font(None, 50)
        button_font = pygame.font.Font(None, 30)
        buttons = _menu_buttons(screen)
        human_button, agent_button = buttons

        mode = Mode.MENU
        tick_speed = BASE_TICK_SPEED
        accumulator = 0.0
        game = Game(GAME_WIDTH, GAME_HEIGHT)

        while True:
            elapsed = clock.tick(60) / 1000.0
            pending: Vec2 | None = None
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return 0
                if mode is Mode.MENU:
                    if human_button.is_clicked(event):
                        mode = Mode.HUMAN
                    if agent_button.is_clicked(event):
                        mode = Mode.AGENT
                elif mode is Mode.HUMAN and event.type == pygame.KEYDOWN:
                    direction = key_to_direction(event.key)
                    if direction is not None and pending is None:
                        pending = direction

            if mode is Mode.MENU:
                _draw_menu(screen, title_font, button_font, buttons)
            elif not game.alive:
                game.reset()
                mode = Mode.MENU
            elif mode is Mode.HUMAN:
                accumulator += elapsed
                while accumulator >= tick_speed:
                    accumulator -= tick_speed
                    game.tick()
                    tick_speed = tick_interval(game.score)
                if pending is not None:
                    game.set_direction(pending)
                draw_game(screen, game, score_font)
            else:
                accumulator += elapsed
                while accumulator >= AGENT_TICK_SPEED:
                    accumulator -= AGENT_TICK_SPEED
                    action = agent.get_action(game.get_state())
                    if action == 1:
                        game.turn_left()
                    elif action == 2:
                        game.turn_right()
                    game.tick()
                draw_game(screen, game, score_font)

            pygame.display.flip()
    finally:
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())