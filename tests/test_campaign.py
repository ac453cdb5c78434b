from dungeon_battler import ClassType, GamePhase, HeroSpec
from dungeon_battler.campaigns import CampaignDefinition, FinalBossDifficulty, QuestDefinition
from dungeon_battler.enums import CampaignStatus, EliteModifier

TRIAL = CampaignDefinition(
    id="trial",
    name="The Trial",
    description="Two short quests against training dummies.",
    difficulty="easy",
    quests=(
        QuestDefinition("trial-1", "First Steps", "", 2, 2, ("tier1",), 1, 0.0, "dummy", 1),
        QuestDefinition("trial-2", "Final Exam", "", 1, 1, ("tier1",), 1, 0.0, "dummy", 1),
    ),
    final_boss_id="dummy",
    final_boss_name="The Grand Dummy",
    final_boss_difficulty=FinalBossDifficulty(2.0, 1.0, EliteModifier.ARMORED),
)


def _campaign_session(make_session):
    session = make_session(hp=20, campaigns={"trial": TRIAL})
    session.start_game([HeroSpec(ClassType.ARCHER, ["archer-2"], hp=100)], campaign_id="trial")
    return session


def _clear_round(session):
    """Leave every monster on 1 hp and finish them with one shot."""
    state = session.state
    for monster in state.monsters:
        monster.hp = 1
    success, message = session.sequential.play_turn("archer-2-0-0")
    assert success, message


def test_quest_rolls_rounds_plus_boss(make_session):
    session = _campaign_session(make_session)
    progress = session.state.campaign
    assert progress.total_rounds == 3
    assert session.state.max_rounds == 3
    assert [m.id for m in session.state.monsters] == ["dummy-0"]


def test_boss_round_completes_the_quest(make_session):
    session = _campaign_session(make_session)
    state = session.state

    _clear_round(session)
    assert state.phase == GamePhase.REWARD
    session.skip_reward("player-0")
    assert state.campaign.current_round == 2
    assert state.phase == GamePhase.SELECT

    _clear_round(session)
    assert state.phase == GamePhase.REWARD
    session.skip_reward("player-0")
    assert state.campaign.current_round == 3
    assert [m.id for m in state.monsters] == ["dummy-boss"]

    _clear_round(session)
    # rounds after the reward limit open the shop instead
    assert state.phase == GamePhase.SHOP
    session.skip_reward("player-0")

    assert state.phase == GamePhase.QUEST_COMPLETE
    assert state.campaign.completed_quests == ["trial-1"]
    assert state.campaign.status == CampaignStatus.IN_PROGRESS


def test_final_quest_boss_and_campaign_completion(make_session):
    session = _campaign_session(make_session)
    state = session.state
    for _ in range(3):
        _clear_round(session)
        session.skip_reward("player-0")
    assert state.phase == GamePhase.QUEST_COMPLETE

    success, _ = session.start_next_quest()
    assert success
    assert state.round == 1
    assert state.campaign.quest_index == 1
    assert state.campaign.total_rounds == 2

    _clear_round(session)
    session.skip_reward("player-0")
    boss = state.monsters[0]
    assert boss.name == "Armored The Grand Dummy"
    assert boss.max_hp == 40
    assert boss.damage_reduction == 0.25

    _clear_round(session)
    session.skip_reward("player-0")
    assert state.phase == GamePhase.CAMPAIGN_COMPLETE
    assert state.campaign.status == CampaignStatus.COMPLETED


def test_party_wipe_fails_the_quest(make_session):
    session = make_session(hp=20, damage=500, campaigns={"trial": TRIAL})
    session.start_game([HeroSpec(ClassType.ARCHER, ["archer-1"], hp=10)], campaign_id="trial")

    session.sequential.play_turn("archer-1-0-0")

    assert session.state.phase == GamePhase.QUEST_FAILED
    assert session.state.campaign.status == CampaignStatus.FAILED


def test_start_next_quest_outside_quest_complete_is_rejected(make_session):
    session = _campaign_session(make_session)
    assert session.start_next_quest() == (False, "No quest to continue")
