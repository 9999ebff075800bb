"""Fixed-capacity store of past transitions for experience replay."""

from __future__ import annotations

import random
from collections import deque
from typing import NamedTuple

from snakers.tensor import Tensor


class Experience(NamedTuple):
    """One transition: state, action, reward, next state and whether it ended."""

    state: Tensor
    action: int
    reward: float
    next_state: Tensor
    done: bool


class ReplayBuffer:
    """Keeps the most recent ``capacity`` experiences, dropping the oldest."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.buffer: deque[Experience] = deque(maxlen=capacity)

    def add(self, experience: Experience | tuple) -> None:
        self.buffer.append(Experience(*experience))

    def __len__(self) -> int:
        return len(self.buffer)

    def sample(self, batch_size: int) -> tuple[Tensor, Tensor, Tensor, Tensor, Tensor]:
        """Draw distinct experiences at random and stack them.

        Returns ``(states, actions, rewards, next_states, dones)``; states are
        ``batch_size`` x features, the rest ``batch_size`` x 1.
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if len(self.buffer) < batch_size:
            raise ValueError(
                f"cannot sample {batch_size} experiences from {len(self.buffer)}"
            )

        chosen = random.sample(list(self.buffer), batch_size)
        features = chosen[0].state.shape[1]

        states = [v for exp in chosen for v in exp.state.tolist()]
        next_states = [v for exp in chosen for v in exp.next_state.tolist()]
        actions = [float(exp.action) for exp in chosen]
        rewards = [float(exp.reward) for exp in chosen]
        dones = [1.0 if exp.done else 0.0 for exp in chosen]

        return (
            Tensor(states, (batch_size, features)),
            Tensor(actions, (batch_size, 1)),
            Tensor(rewards, (batch_size, 1)),
            Tensor(next_states, (batch_size, features)),
            Tensor(dones, (batch_size, 1)),
        )