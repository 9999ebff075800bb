"""Neural networks on NumPy, a Snake game, and a deep Q-learning agent that plays it."""

__version__ = "0.1.0"