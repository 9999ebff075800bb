import pytest

from snakers.replay_buffer import Experience, ReplayBuffer
from snakers.tensor import Tensor


def _filled_buffer():
    buffer = ReplayBuffer(100)
    for i in range(10):
        state = Tensor([float(i)] * 4, (1, 4))
        next_state = Tensor([float(i + 1)] * 4, (1, 4))
        buffer.add((state, i, i * 10.0, next_state, i == 9))
    return buffer


def test_replay_buffer():
    buffer = _filled_buffer()
    assert len(buffer) == 10

    states, actions, rewards, next_states, dones = buffer.sample(5)
    assert states.shape == (5, 4)
    assert actions.shape == (5, 1)
    assert rewards.shape == (5, 1)
    assert next_states.shape == (5, 4)
    assert dones.shape == (5, 1)

    for i in range(10, 110):
        state = Tensor([float(i)] * 4, (1, 4))
        buffer.add((state, i, 0.0, state, False))
    assert len(buffer) == 100
    assert buffer.buffer[0].state.tolist()[0] == 10.0


def test_sample_rows_stay_aligned():
    buffer = _filled_buffer()
    states, actions, rewards, next_states, dones = buffer.sample(10)
    state_rows = states.tolist()
    next_rows = next_states.tolist()
    for row, action in enumerate(actions.tolist()):
        assert state_rows[row * 4:(row + 1) * 4] == [action] * 4
        assert next_rows[row * 4:(row + 1) * 4] == [action + 1] * 4
        assert rewards.tolist()[row] == action * 10.0
        assert dones.tolist()[row] == (1.0 if action == 9 else 0.0)


def test_sample_has_no_duplicates():
    buffer = _filled_buffer()
    _, actions, _, _, _ = buffer.sample(10)
    assert sorted(actions.tolist()) == [float(i) for i in range(10)]


def test_sample_too_many_raises():
    buffer = _filled_buffer()
    with pytest.raises(ValueError):
        buffer.sample(11)


def test_add_accepts_experience():
    buffer = ReplayBuffer(2)
    state = Tensor([1.0, 2.0], (1, 2))
    buffer.add(Experience(state, 1, 0.5, state, True))
    assert buffer.buffer[0].action == 1
    assert buffer.buffer[0].done is True


def test_oldest_dropped_at_capacity():
    buffer = ReplayBuffer(2)
    state = Tensor([0.0], (1, 1))
    for action in range(3):
        buffer.add((state, action, 0.0, state, False))
    assert [exp.action for exp in buffer.buffer] == [1, 2]


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ReplayBuffer(0)