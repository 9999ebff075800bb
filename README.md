# snakers

A small feed-forward neural-network library built on NumPy, a grid-based
Snake game, and a deep Q-learning agent that learns to play it.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Commands

### `snakers-train`

Trains a fresh agent (7 state inputs, 3 actions) on a 27×21 board and saves
its Q-network.

- `--episodes N` – episodes to train for (default 100).
- `--output PATH` – where to save the model (default `input/snake_agent.bin`).
  The directory must already exist; if the file cannot be written, an error
  is printed and nothing is saved.

Each episode's number, total reward and exploration rate are printed.

### `snakers`

Loads a trained agent and opens the game window. The agent is loaded before
the window opens, so a model must exist even to play by hand; if it cannot be
loaded the command prints an error and exits with status 1.

- `--model PATH` – the agent to load (default `input/snake_agent.bin`).

From the menu, choose **Human Player** to steer with the arrow keys or WASD
(only turns to the side are accepted, and the game speeds up as the score
rises), or **AI** to watch the agent play. When the snake dies the board is
reset and the menu returns. Close the window to quit.

### `snakers-mnist`

Trains a classifier with one hidden layer of 128 units and 10 outputs on a
digit data set in CSV form, then prints the accuracy on a test set. Each row
holds the label (0–9) followed by the pixel values (0–255), with no header;
the input width is taken from the number of pixel columns, and pixel values
that are not numbers count as 0.

- `--train PATH` – training data (default `./input/mnist_train.csv`).
- `--test PATH` – test data (default `./input/mnist_test.csv`).
- `--epochs N` – default 5.
- `--batch-size N` – default 32.

Unreadable files or bad labels are reported and the command exits with
status 1.

## Library use

The modules are `snakers.tensor`, `snakers.layers` (`Dense`, `ReLU`,
`Softmax`), `snakers.losses` (`MeanSquaredError`,
`CategoricalCrossEntropy`), `snakers.optimizers` (`SGD`),
`snakers.sequential`, `snakers.game`, `snakers.replay_buffer` and
`snakers.agent`.

```python
from snakers.tensor import Tensor
from snakers.layers import Dense, ReLU
from snakers.losses import MeanSquaredError
from snakers.optimizers import SGD
from snakers.sequential import Sequential

model = Sequential(
    [Dense(2, 8), ReLU(), Dense(8, 1)],
    MeanSquaredError(),
    SGD(0.01),
)
x = Tensor([1.0, 2.0, 3.0, 4.0], [2, 2])
y = Tensor([1.0, 2.0], [2, 1])
model.train_on_batch(x, y)
print(model.predict(x).tolist())
```

`Sequential.fit(x, y, epochs, batch_size)` trains on shuffled mini-batches
with a softmax applied to the outputs, and returns the mean loss of each
epoch. `Sequential.to_dict()` and `Sequential.from_dict()` turn a model into
plain data and back.

Playing the game without a window:

```python
from snakers.game import Game

game = Game(10, 10)
state = game.reset()                # 1x7 tensor: dangers and food direction
reward, state, done = game.step(0)  # 0 ahead, 1 turn left, 2 turn right
```

Rewards are -20 for dying, 10 for eating, 1 for moving closer to the food and
-1 otherwise.

Training and saving an agent:

```python
from snakers.agent import Agent
from snakers.game import Game

agent = Agent(7, 3)
totals = agent.train(Game(27, 21), 10)  # total reward of each episode
agent.store("agent.bin")
restored = Agent.load("agent.bin")
action = restored.get_action(Game(27, 21).get_state())
```

## Limitations

- Saved models are JSON text, whatever the file name; only the Q-network is
  stored, not the replay buffer or the exploration rate.
- Training runs on the CPU only, and there is no way to resume an
  interrupted training run.