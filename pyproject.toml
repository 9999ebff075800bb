[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "snakers"
version = "0.1.0"
description = "A small neural-network library with a Snake game and a deep Q-learning agent that learns to play it"
requires-python = ">=3.10"
keywords = ["snake", "reinforcement-learning", "dqn", "neural-network", "mnist", "game"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "numpy",
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
snakers = "snakers.gui:main"
snakers-train = "snakers.train_agent:main"
snakers-mnist = "snakers.mnist:main"

[tool.hatch.build.targets.wheel]
packages = ["snakers"]

[tool.pytest.ini_options]
addopts = "-ra"
