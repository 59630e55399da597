"""
Tests for replay recording and the baseline agent.
"""

import pytest

from contestants.baseline_timing.agent import StackerAgent
from stacker.stack_core.env_gym import StackerEnv, ACTION_DROP, ACTION_WAIT
from stacker.stack_core.replay_recorder import (
    ReplayRecorder,
    compute_config_hash,
    load_replay,
    record_episode,
    replay_actions,
)


@pytest.fixture
def env():
    env = StackerEnv()
    yield env
    env.close()


def play_one_perfect_then_miss(recorder):
    recorder.reset()
    for _ in range(175):
        recorder.step(ACTION_WAIT)
    recorder.step(ACTION_DROP)
    return recorder.step(ACTION_DROP)


class TestReplayRecorder:
    """Test episode recording."""

    def test_records_actions_and_scores(self, env):
        recorder = ReplayRecorder(env, agent_name="scripted")
        _, _, terminated, _, _ = play_one_perfect_then_miss(recorder)

        data = recorder.get_replay_data()

        assert terminated
        assert data["agent"] == "scripted"
        assert data["total_steps"] == 177
        assert data["drop_steps"] == [175, 176]
        assert data["final_score"] == 1
        assert data["termination_reason"] == "miss"
        assert not recorder.recording

    def test_save_and_replay(self, env, tmp_path):
        recorder = ReplayRecorder(env)
        play_one_perfect_then_miss(recorder)
        path = recorder.save(tmp_path / "replays" / "episode.json")

        data = load_replay(path)
        fresh = StackerEnv()
        info = replay_actions(fresh, data["actions"])
        fresh.close()

        assert info["score"] == data["final_score"]
        assert info["terminated_reason"] == "miss"

    def test_frame_skip_round_trips(self, tmp_path):
        skipping = StackerEnv(frame_skip=5)
        recorder = ReplayRecorder(skipping)
        recorder.reset()
        # 35 steps of 5 ticks at 2 px reach the base at x=100
        for _ in range(35):
            recorder.step(ACTION_WAIT)
        recorder.step(ACTION_DROP)
        recorder.step(ACTION_DROP)
        path = recorder.save(tmp_path / "skipping.json")
        skipping.close()

        data = load_replay(path)
        assert data["frame_skip"] == 5
        assert data["final_score"] == 1

        fresh = StackerEnv(frame_skip=data["frame_skip"])
        info = replay_actions(fresh, data["actions"], frame_skip=data["frame_skip"])
        fresh.close()
        assert info["score"] == 1

    def test_frame_skip_mismatch_rejected(self, env):
        with pytest.raises(ValueError):
            replay_actions(env, [ACTION_DROP], frame_skip=4)

    def test_refuses_overwrite(self, env, tmp_path):
        recorder = ReplayRecorder(env)
        play_one_perfect_then_miss(recorder)
        path = recorder.save(tmp_path / "episode.json")

        with pytest.raises(FileExistsError):
            recorder.save(path, overwrite=False)

    def test_missing_replay_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_replay(tmp_path / "missing.json")

    def test_config_hash_is_stable(self, env):
        assert compute_config_hash(env.config) == compute_config_hash(env.config)
        assert len(compute_config_hash(env.config)) == 8

    def test_record_episode(self, env):
        data = record_episode(env, lambda obs: ACTION_DROP, agent_name="eager")

        assert data["total_steps"] == 1
        assert data["final_score"] == 0


class TestBaselineAgent:
    """The timing agent should build a tower without missing."""

    def test_builds_tower(self, env):
        agent = StackerAgent()
        obs, _ = env.reset()

        for _ in range(5000):
            obs, _, terminated, truncated, info = env.step(agent.act(obs))
            assert not terminated
            if info["level"] >= 10:
                break

        assert info["level"] >= 10
        assert info["width"] > 200.0

    def test_waits_when_misaligned(self, env):
        agent = StackerAgent()
        obs, _ = env.reset()
        assert agent.act(obs) == ACTION_WAIT
