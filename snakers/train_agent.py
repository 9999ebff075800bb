"""Command that trains a snake-playing agent and saves its network."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from snakers.agent import Agent
from snakers.game import ACTION_SIZE, STATE_SIZE, Game

DEFAULT_MODEL_PATH = "input/snake_agent.bin"
GAME_WIDTH = 27
GAME_HEIGHT = 21


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Train a snake-playing agent.")
    parser.add_argument("--episodes", type=int, default=100, help="episodes to train for")
    parser.add_argument(
        "--output", default=DEFAULT_MODEL_PATH, help="where to save the trained model"
    )
    args = parser.parse_args(argv)

    print("initializing Snake game and RL Agent...")
    game = Game(GAME_WIDTH, GAME_HEIGHT)
    agent = Agent(STATE_SIZE, ACTION_SIZE)

    print(f"starting training for {args.episodes} episodes...")
    agent.train(game, args.episodes)
    print("\ntraining finished.")

    try:
        agent.store(args.output)
    except OSError as exc:
        print(f"error saving model: {exc}", file=sys.stderr)
    else:
        print(f"successfully saved trained model to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())