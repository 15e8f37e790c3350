# tests/core/allen/test_states.py

import pytest
import random
from unittest.mock import MagicMock
from loguru import logger
from lunasim.core.allen.state_models import Approach, Mood, MoodContext
from lunasim.core.allen.states import (
    STATE_MAPPING,
    AngryState,
    ConfusedState,
    FearfulState,
    HappyState,
    NeutralState,
    SadState,
)
import logging


@pytest.fixture(autouse=True)
def caplog_for_loguru(caplog):
    """
    这个 fixture 会自动为每个测试配置 loguru，
    使其日志能够被 pytest 的 caplog 捕获。
    """
    caplog.set_level(1)

    def loguru_to_logging(msg):
        level = msg.record["level"].no
        message = msg.record["message"]
        logging.log(level, message)

    try:
        logger.remove(handler_id=None)
    except ValueError:
        pass

    logger.add(loguru_to_logging, level="TRACE")

    yield


@pytest.fixture
def quiet_rng():
    """随机事件永远不触发的 rng (randint 恒为 1)"""
    rng = MagicMock(spec=random.Random)
    rng.randint.return_value = 1
    return rng


@pytest.fixture
def lucky_rng():
    """随机事件必定触发的 rng (randint 恒为 0)"""
    rng = MagicMock(spec=random.Random)
    rng.randint.return_value = 0
    return rng


# (状态类, 接近方式, 期望目标; None 表示保持不变)
TRANSITION_TABLE = [
    (HappyState, Approach.FRIENDLY, None),
    (HappyState, Approach.AGGRESSIVE, Mood.NEUTRAL),
    (HappyState, Approach.CONFUSED, Mood.CONFUSED),
    (HappyState, Approach.SAD, Mood.SAD),
    (HappyState, Approach.FEARFUL, Mood.FEARFUL),
    (HappyState, Approach.NEUTRAL, None),
    (NeutralState, Approach.FRIENDLY, Mood.HAPPY),
    (NeutralState, Approach.AGGRESSIVE, Mood.ANGRY),
    (NeutralState, Approach.CONFUSED, Mood.CONFUSED),
    (NeutralState, Approach.SAD, Mood.SAD),
    (NeutralState, Approach.FEARFUL, Mood.FEARFUL),
    (NeutralState, Approach.NEUTRAL, None),
    (AngryState, Approach.FRIENDLY, Mood.NEUTRAL),
    (AngryState, Approach.AGGRESSIVE, None),
    (AngryState, Approach.CONFUSED, None),
    (AngryState, Approach.SAD, None),
    (AngryState, Approach.FEARFUL, None),
    (AngryState, Approach.NEUTRAL, None),
    (ConfusedState, Approach.FRIENDLY, Mood.HAPPY),
    (ConfusedState, Approach.AGGRESSIVE, Mood.ANGRY),
    (ConfusedState, Approach.CONFUSED, None),
    (ConfusedState, Approach.SAD, Mood.SAD),
    (ConfusedState, Approach.FEARFUL, Mood.FEARFUL),
    (ConfusedState, Approach.NEUTRAL, None),
    (SadState, Approach.FRIENDLY, Mood.NEUTRAL),
    (SadState, Approach.AGGRESSIVE, Mood.ANGRY),
    (SadState, Approach.CONFUSED, Mood.CONFUSED),
    (SadState, Approach.SAD, Mood.SAD),
    (SadState, Approach.FEARFUL, Mood.FEARFUL),
    (SadState, Approach.NEUTRAL, Mood.NEUTRAL),
    (FearfulState, Approach.AGGRESSIVE, Mood.ANGRY),
    (FearfulState, Approach.CONFUSED, Mood.CONFUSED),
    (FearfulState, Approach.SAD, Mood.SAD),
    (FearfulState, Approach.NEUTRAL, Mood.NEUTRAL),
    (FearfulState, Approach.FEARFUL, None),
]


class TestTransitionTable:
    @pytest.mark.parametrize("state_class, approach, expected", TRANSITION_TABLE)
    def test_transition(self, state_class, approach, expected, quiet_rng):
        """测试 (状态, 接近方式) -> 目标情绪 (随机事件被抑制)"""
        state = state_class()
        decision = state.update_mood(approach, MoodContext(), quiet_rng)

        assert decision.target == expected
        assert decision.terminate_session is False

    def test_state_mapping_covers_all_moods(self):
        """测试 STATE_MAPPING 覆盖全部六种情绪，且类的 mood 与键一致"""
        assert set(STATE_MAPPING) == set(Mood)
        for mood, state_class in STATE_MAPPING.items():
            assert state_class.mood == mood


class TestNeutralState:
    def test_artifact_roll_uses_fifty_sides(self, quiet_rng):
        """测试神器概率为 1/50"""
        NeutralState().update_mood(Approach.NEUTRAL, MoodContext(), quiet_rng)
        quiet_rng.randint.assert_called_once_with(0, 49)

    @pytest.mark.parametrize("approach", list(Approach))
    def test_artifact_found_always_goes_happy(self, approach, lucky_rng, caplog):
        """测试掷出神器时，无论玩家做什么都转为 Happy"""
        decision = NeutralState().update_mood(approach, MoodContext(), lucky_rng)

        assert decision.target == Mood.HAPPY
        assert decision.narration == [NeutralState.artifact_line]
        assert any("月球神器" in record.message for record in caplog.records)


class TestAngryState:
    def test_raygun_roll_uses_ten_sides(self, quiet_rng):
        """测试射线枪概率为 1/10"""
        AngryState().update_mood(Approach.FRIENDLY, MoodContext(), quiet_rng)
        quiet_rng.randint.assert_called_once_with(0, 9)

    @pytest.mark.parametrize("approach", list(Approach))
    def test_raygun_terminates_session(self, approach, lucky_rng):
        """测试射线枪触发时结束会话，且不请求任何转换"""
        decision = AngryState().update_mood(approach, MoodContext(), lucky_rng)

        assert decision.terminate_session is True
        assert decision.target is None
        assert decision.narration == [AngryState.raygun_line]


class TestSadState:
    def test_neutral_with_high_mood_level_goes_happy(self, quiet_rng):
        """测试 mood_level > 2 时 neutral 转为 Happy"""
        decision = SadState().update_mood(Approach.NEUTRAL, MoodContext(mood_level=3), quiet_rng)
        assert decision.target == Mood.HAPPY

    def test_neutral_with_low_mood_level_stays(self, quiet_rng):
        """测试 mood_level <= -2 时保持悲伤"""
        decision = SadState().update_mood(Approach.NEUTRAL, MoodContext(mood_level=-2), quiet_rng)
        assert decision.target is None

    def test_direct_transitions_ignore_mood_level(self, quiet_rng):
        """测试直接转换优先于 mood_level"""
        decision = SadState().update_mood(Approach.FRIENDLY, MoodContext(mood_level=5), quiet_rng)
        assert decision.target == Mood.NEUTRAL

    def test_sad_never_rolls(self, quiet_rng):
        SadState().update_mood(Approach.NEUTRAL, MoodContext(), quiet_rng)
        quiet_rng.randint.assert_not_called()


class TestFearfulState:
    def test_friendly_raises_mood_level_and_calms(self, quiet_rng):
        """测试友好让 mood_level +2，随后因 > 0 转为 Neutral"""
        context = MoodContext()
        decision = FearfulState().update_mood(Approach.FRIENDLY, context, quiet_rng)

        assert context.mood_level == 2
        assert decision.target == Mood.NEUTRAL

    def test_friendly_with_very_low_mood_level_stays(self, quiet_rng):
        """测试 mood_level 很低时，友好只增加数值而不转换"""
        context = MoodContext(mood_level=-4)
        decision = FearfulState().update_mood(Approach.FRIENDLY, context, quiet_rng)

        assert context.mood_level == -2
        assert decision.target is None

    def test_fearful_with_positive_mood_level_goes_neutral(self, quiet_rng):
        """测试之前积累的 mood_level 会让 fearful 输入也转为 Neutral"""
        decision = FearfulState().update_mood(Approach.FEARFUL, MoodContext(mood_level=2), quiet_rng)
        assert decision.target == Mood.NEUTRAL

    def test_direct_transition_does_not_touch_mood_level(self, quiet_rng):
        context = MoodContext(mood_level=1)
        decision = FearfulState().update_mood(Approach.AGGRESSIVE, context, quiet_rng)

        assert decision.target == Mood.ANGRY
        assert context.mood_level == 1


class TestStateHooks:
    def test_enter_and_express_return_text(self):
        """测试 enter / express_mood 返回各自的叙述文本"""
        state = HappyState()
        assert state.enter() == HappyState.enter_line
        assert state.express_mood() == HappyState.express_line
        assert "Allen" in state.enter()

    def test_exit_is_noop(self):
        state = ConfusedState()
        assert state.exit() is None
        assert state.released is False

    def test_release_twice_raises(self):
        """测试同一个状态不能被释放两次"""
        state = AngryState()
        state.release()
        assert state.released is True

        with pytest.raises(RuntimeError, match="已被释放过"):
            state.release()
