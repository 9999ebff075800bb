"""Grid snake game with a reinforcement-learning interface."""

from __future__ import annotations

import math
import random
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from snakers.tensor import Tensor

Vec2 = tuple[int, int]

REWARD_DEATH = -20.0
REWARD_FOOD = 10.0
REWARD_CLOSER = 1.0
REWARD_FURTHER = -1.0

STATE_SIZE = 7
ACTION_SIZE = 3


class RelativeDirections(NamedTuple):
    """Unit vectors relative to the current heading."""

    forward: Vec2
    backward: Vec2
    left: Vec2
    right: Vec2


_RELATIVE: dict[Vec2, RelativeDirections] = {
    (1, 0): RelativeDirections((1, 0), (-1, 0), (0, -1), (0, 1)),
    (-1, 0): RelativeDirections((-1, 0), (1, 0), (0, 1), (0, -1)),
    (0, -1): RelativeDirections((0, -1), (0, 1), (-1, 0), (1, 0)),
    (0, 1): RelativeDirections((0, 1), (0, -1), (1, 0), (-1, 0)),
}
_STILL = RelativeDirections((0, 0), (0, 0), (0, 0), (0, 0))


class Game:
    """A snake on a ``width`` x ``height`` grid chasing a single piece of food.

    Coordinates are ``(x, y)`` with ``y`` growing downwards; the snake's head
    is the first segment.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        self.width = width
        self.height = height
        self.target: Vec2 | None = None
        self.move_direction: Vec2 = (1, 0)
        self._attempted_direction: Vec2 | None = None
        self._snake: deque[Vec2] = deque()
        self._segments: set[Vec2] = set()
        self._score = 0
        self._alive = True
        self._restart()

    @property
    def snake(self) -> tuple[Vec2, ...]:
        """The segments from head to tail."""
        return tuple(self._snake)

    @snake.setter
    def snake(self, segments: Iterable[Vec2]) -> None:
        body = deque(tuple(cell) for cell in segments)
        if not body:
            raise ValueError("the snake needs at least one segment")
        self._snake = body
        self._segments = set(body)

    @property
    def score(self) -> int:
        return self._score

    @property
    def alive(self) -> bool:
        return self._alive

    @property
    def head(self) -> Vec2:
        return self._snake[0]

    def _restart(self) -> None:
        self.snake = [(self.width // 2, self.height // 2)]
        self._score = 0
        self._alive = True
        self._attempted_direction = None
        self.move_direction = (1, 0)
        self._generate_target()

    def tick(self) -> None:
        """Advance the snake by one cell."""
        attempted = self._attempted_direction
        if attempted is not None:
            # Only perpendicular turns are accepted.
            if attempted[0] * self.move_direction[0] + attempted[1] * self.move_direction[1] == 0:
                self.move_direction = attempted
        self._attempted_direction = None

        head = self.head
        new_head = (head[0] + self.move_direction[0], head[1] + self.move_direction[1])

        if self._hits_self(new_head) or self._hits_wall(new_head):
            self._alive = False
            return

        self._snake.appendleft(new_head)
        self._segments.add(new_head)

        if self.target is not None and new_head == self.target:
            self._score += 1
            self._generate_target()
        else:
            self._segments.discard(self._snake.pop())

    def set_direction(self, new_direction: Vec2) -> None:
        """Request a heading for the next tick."""
        self._attempted_direction = tuple(new_direction)

    def turn_left(self) -> None:
        self.set_direction(self.relative_directions().left)

    def turn_right(self) -> None:
        self.set_direction(self.relative_directions().right)

    def relative_directions(self) -> RelativeDirections:
        """Forward, backward, left and right for the current heading."""
        return _RELATIVE.get(self.move_direction, _STILL)

    def _generate_target(self) -> None:
        """Pick a random cell, then search outwards for a free one."""
        start_x = random.randrange(self.width)
        start_y = random.randrange(self.height)

        if (start_x, start_y) not in self._segments:
            self.target = (start_x, start_y)
            return

        for radius in range(1, max(self.width, self.height)):
            for i in range(-radius, radius + 1):
                candidates = (
                    (start_x + i, start_y - radius),
                    (start_x + i, start_y + radius),
                    (start_x + radius, start_y + i),
                    (start_x - radius, start_y + i),
                )
                for cell in candidates:
                    if not self._hits_wall(cell) and cell not in self._segments:
                        self.target = cell
                        return

        self.target = None

    def _hits_self(self, cell: Vec2) -> bool:
        return cell in self._segments and cell != self._snake[-1]

    def _hits_wall(self, cell: Vec2) -> bool:
        x, y = cell
        return x < 0 or x >= self.width or y < 0 or y >= self.height

    def _is_danger(self, cell: Vec2) -> bool:
        return self._hits_wall(cell) or self._hits_self(cell)

    def distance_to_food(self) -> float:
        """Euclidean distance from the head to the food."""
        if self.target is None:
            raise RuntimeError("target is not set")
        head = self.head
        return math.hypot(self.target[0] - head[0], self.target[1] - head[1])

    def step(self, action: int) -> tuple[float, Tensor, bool]:
        """Apply an action and tick once.

        Actions: 0 keeps going, 1 turns left, 2 turns right.
        Returns ``(reward, next_state, done)``.
        """
        directions = self.relative_directions()
        choices = (directions.forward, directions.left, directions.right)
        if action not in (0, 1, 2):
            raise ValueError("action must be 0, 1, or 2")

        dist_before = self.distance_to_food()
        score_before = self._score

        self.set_direction(choices[action])
        self.tick()

        food_eaten = self._score != score_before
        dist_after = self.distance_to_food()

        if not self._alive:
            reward = REWARD_DEATH
        elif food_eaten:
            reward = REWARD_FOOD
        elif dist_after < dist_before:
            reward = REWARD_CLOSER
        else:
            reward = REWARD_FURTHER

        return reward, self.get_state(), not self._alive

    def reset(self) -> Tensor:
        """Start a new round and return its initial state."""
        self._restart()
        return self.get_state()

    def get_state(self) -> Tensor:
        """``[danger f, l, r; food f, b, l, r]`` as a 1 x 7 tensor of 0/1."""
        head = self.head
        directions = self.relative_directions()

        def ahead(d: Vec2) -> Vec2:
            return head[0] + d[0], head[1] + d[1]

        danger_forward = self._is_danger(ahead(directions.forward))
        danger_left = self._is_danger(ahead(directions.left))
        danger_right = self._is_danger(ahead(directions.right))

        food_forward = food_backward = food_left = food_right = False
        if self.target is not None:
            fx = self.target[0] - head[0]
            fy = self.target[1] - head[1]
            dot_fb = fx * directions.forward[0] + fy * directions.forward[1]
            food_forward = dot_fb > 0
            food_backward = dot_fb < 0
            dot_lr = fx * directions.left[0] + fy * directions.left[1]
            food_left = dot_lr > 0
            food_right = dot_lr < 0

        flags = (
            danger_forward,
            danger_left,
            danger_right,
            food_forward,
            food_backward,
            food_left,
            food_right,
        )
        return Tensor([float(flag) for flag in flags], (1, STATE_SIZE))