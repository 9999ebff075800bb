from snakers.agent import Agent
from snakers.train_agent import main


def test_main_trains_and_saves_loadable_model(tmp_path, capsys):
    output = tmp_path / "agent.bin"
    assert main(["--episodes", "1", "--output", str(output)]) == 0
    out = capsys.readouterr().out
    assert "starting training for 1 episodes..." in out
    assert f"successfully saved trained model to {output}" in out
    loaded = Agent.load(output)
    assert loaded.action_size == 3
    assert loaded.q_network.layers[0].weights.shape[0] == 7


def test_main_reports_save_error(tmp_path, capsys):
    output = tmp_path / "missing" / "agent.bin"
    assert main(["--episodes", "1", "--output", str(output)]) == 0
    captured = capsys.readouterr()
    assert "error saving model:" in captured.err
    assert not output.exists()