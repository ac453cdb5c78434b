import numpy as np

from dungeon_battler.rl import DungeonEnv, RewardConfig


def test_environment_reset_and_mask():
    env = DungeonEnv(seed=3)
    obs, info = env.reset()
    assert obs.shape == env.observation_space.shape
    assert obs.dtype == np.float32
    mask = info["action_mask"]
    assert mask.dtype == np.int8
    assert mask.shape[0] == env.action_space.n
    # the controlled hero always has something to play on its turn
    assert mask.any()
    assert info["phase"] == "SELECT"


def test_environment_invalid_action_penalty():
    env = DungeonEnv(seed=3, reward_config=RewardConfig(invalid_action_penalty=-0.5))
    obs, info = env.reset()
    mask = info["action_mask"]
    invalid_indices = np.where(mask == 0)[0]
    action = int(invalid_indices[0])
    turn = env.state.turn
    _, reward, terminated, _, info = env.step(action)
    assert info.get("invalid_action") is True
    assert reward == -0.5
    assert not terminated
    assert env.state.turn == turn

    valid_action = int(np.where(info["action_mask"] == 1)[0][0])
    obs, reward, terminated, truncated, info = env.step(valid_action)
    assert obs.shape == env.observation_space.shape
    assert isinstance(reward, float)
    assert isinstance(terminated, bool)
    assert isinstance(truncated, bool)


def test_same_seed_gives_the_same_episode_start():
    first, _ = DungeonEnv(seed=11).reset()
    second, _ = DungeonEnv(seed=11).reset()
    np.testing.assert_array_equal(first, second)


def test_episode_runs_to_an_end():
    env = DungeonEnv(seed=5, max_turns=30)
    _, info = env.reset()
    terminated = truncated = False
    for _ in range(500):
        mask = info["action_mask"]
        if not mask.any():
            break
        _, _, terminated, truncated, info = env.step(int(np.flatnonzero(mask)[0]))
        if terminated or truncated:
            break
    assert terminated or truncated or env.state.turn > env.max_turns
    if terminated:
        assert info["won"] == (env.state.phase.value in {"REWARD", "SHOP", "VICTORY"})


def test_invalid_action_past_the_turn_limit_truncates():
    env = DungeonEnv(seed=3, max_turns=5)
    _, info = env.reset()
    env.state.turn = env.max_turns + 1
    action = int(np.where(info["action_mask"] == 0)[0][0])
    _, _, terminated, truncated, info = env.step(action)
    assert info["invalid_action"] is True
    assert not terminated
    assert truncated is True
