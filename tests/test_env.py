import gymnasium as gym
import numpy as np
from gymnasium.utils.env_checker import check_env

import falling_blocks.env  # noqa: F401
from falling_blocks.env.falling_blocks_env import FallingBlocksEnv
from falling_blocks.game import Action


def test_env_passes_checker():
    check_env(FallingBlocksEnv(), skip_render_check=True)


def test_registered_env_reset_and_step():
    env = gym.make("FallingBlocks-10x20-v0")
    obs, info = env.reset(seed=1)
    assert obs["grid"].shape == (20, 10)
    assert (obs["grid"] < 0).sum() == 4
    assert info["score"] == 0
    obs, reward, terminated, truncated, info = env.step(int(Action.NONE))
    assert reward == 0.0
    assert not truncated
    env.close()


def test_hard_drop_locks_piece():
    env = FallingBlocksEnv()
    env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(int(Action.HARD_DROP))
    assert (obs["grid"] > 0).sum() == 4
    assert not terminated


def test_episode_terminates_on_game_over():
    env = FallingBlocksEnv()
    env.reset(seed=0)
    terminated = False
    for _ in range(200):
        _, _, terminated, _, _ = env.step(int(Action.HARD_DROP))
        if terminated:
            break
    assert terminated


def test_same_seed_same_pieces():
    a, b = FallingBlocksEnv(), FallingBlocksEnv()
    obs_a, _ = a.reset(seed=7)
    obs_b, _ = b.reset(seed=7)
    assert np.array_equal(obs_a["grid"], obs_b["grid"])
    assert obs_a["next_piece"] == obs_b["next_piece"]


def test_rgb_render():
    env = FallingBlocksEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (240, 120, 3)
    assert img.dtype == np.uint8


def test_random_agent_runs(capsys):
    from falling_blocks.rl.random_agent import run_random

    total = run_random(steps=300, seed=0)
    assert total >= 0.0
    assert "Random agent total reward" in capsys.readouterr().out
