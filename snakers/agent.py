"""Deep Q-learning agent that learns to play the snake game."""

from __future__ import annotations

import json
import random
from collections.abc import Sequence
from os import PathLike

from snakers.game import Game
from snakers.layers import Dense, ReLU
from snakers.losses import MeanSquaredError
from snakers.optimizers import SGD
from snakers.replay_buffer import Experience, ReplayBuffer
from snakers.sequential import Sequential
from snakers.tensor import Tensor

_HIDDEN_SIZE = 256
_LEARNING_RATE = 0.001
_BUFFER_CAPACITY = 10000


def _argmax(values: Sequence[float]) -> int:
    """Index of the largest value; the last one wins on ties, 0 when empty."""
    best = 0
    for index, value in enumerate(values):
        if value >= values[best]:
            best = index
    return best


class Agent:
    """A Q-network with a target network and an experience replay buffer."""

    def __init__(self, state_size: int, action_size: int) -> None:
        network = Sequential(
            [Dense(state_size, _HIDDEN_SIZE), ReLU(), Dense(_HIDDEN_SIZE, action_size)],
            MeanSquaredError(),
            SGD(_LEARNING_RATE),
        )
        self._configure(
            network,
            action_size,
            batch_size=32,
            epsilon=1.0,
            target_update_frequency=25,
        )

    def _configure(
        self,
        q_network: Sequential,
        action_size: int,
        *,
        batch_size: int,
        epsilon: float,
        target_update_frequency: int,
    ) -> None:
        self.q_network = q_network
        self.target_network = q_network.clone()
        self.replay_buffer = ReplayBuffer(_BUFFER_CAPACITY)
        self.batch_size = batch_size
        self.discount_factor = 0.99
        self.epsilon = epsilon
        self.epsilon_decay = 0.995
        self.min_epsilon = 0.01
        self.target_update_counter = 0
        self.target_update_frequency = target_update_frequency
        self.action_size = action_size

    def train(self, game: Game, num_episodes: int) -> list[float]:
        """Play and learn for ``num_episodes`` rounds; returns each round's total reward."""
        totals: list[float] = []
        for episode in range(num_episodes):
            state = game.reset()
            total_reward = 0.0
            done = False

            while not done:
                action = self._choose_action(state)
                reward, next_state, done = game.step(action)
                total_reward += reward
                self.replay_buffer.add(Experience(state, action, reward, next_state, done))
                state = next_state
                self.train_step()

            totals.append(total_reward)
            print(
                f"Episode: {episode + 1}, Total Reward: {total_reward}, "
                f"Epsilon: {self.epsilon:.4f}"
            )
        return totals

    def get_action(self, state: Tensor) -> int:
        """The action with the highest predicted Q-value."""
        return _argmax(self.q_network.predict(state).tolist())

    def _choose_action(self, state: Tensor) -> int:
        if random.random() < self.epsilon:
            return random.randrange(self.action_size)
        return self.get_action(state)

    def train_step(self) -> None:
        """Learn from one replayed batch once enough experience is stored."""
        if len(self.replay_buffer) < self.batch_size:
            return

        states, actions, rewards, next_states, dones = self.replay_buffer.sample(
            self.batch_size
        )
        width = self.action_size
        next_q = self.target_network.predict(next_states).tolist()
        max_next_q = [max(next_q[start:start + width]) for start in range(0, len(next_q), width)]

        q_targets = self.q_network.predict(states).tolist()
        rows = zip(actions.tolist(), rewards.tolist(), dones.tolist(), max_next_q)
        for row, (action, reward, done, best_next) in enumerate(rows):
            target = reward + self.discount_factor * best_next * (1.0 - done)
            q_targets[row * width + int(action)] = target

        self.q_network.train_on_batch(states, Tensor(q_targets, (self.batch_size, width)))

        if self.epsilon > self.min_epsilon:
            self.epsilon *= self.epsilon_decay
        self.target_update_counter += 1
        if self.target_update_counter % self.target_update_frequency == 0:
            self.target_network.copy_weights_from(self.q_network)

    def store(self, filepath: str | PathLike[str]) -> None:
        """Save the Q-network to ``filepath``."""
        with open(filepath, "w", encoding="utf-8") as handle:
            json.dump(self.q_network.to_dict(), handle)

    @staticmethod
    def load(filepath: str | PathLike[str]) -> Agent:
        """An agent for playing, built from a Q-network saved with :meth:`store`."""
        with open(filepath, encoding="utf-8") as handle:
            q_network = Sequential.from_dict(json.load(handle))
        if not q_network.layers or not isinstance(q_network.layers[-1], Dense):
            raise ValueError("the saved network must end with a dense layer")
        action_size = q_network.layers[-1].weights.shape[1]

        agent = Agent.__new__(Agent)
        agent._configure(
            q_network,
            action_size,
            batch_size=64,
            epsilon=0.01,
            target_update_frequency=100,
        )
        return agent