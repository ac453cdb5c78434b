import asyncio
import logging

from dungeon_battler import ClassType, GamePhase, HeroSpec, MonsterSpec, PlayMode
from dungeon_battler.config import CombatConfig, SyncConfig
from dungeon_battler.sync import InMemoryStore, SyncBridge


def _session(make_session):
    session = make_session(hp=100, config=CombatConfig(mode=PlayMode.SIMULTANEOUS))
    session.start_mock_battle(
        [HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30), HeroSpec(ClassType.ARCHER, ["archer-2"], hp=30)],
        [MonsterSpec("dummy")],
    )
    return session


def test_host_resolves_once_every_client_is_ready(make_session):
    async def scenario():
        store = InMemoryStore()
        host_session, follower_session = _session(make_session), _session(make_session)
        host = SyncBridge(host_session, store, "b1", is_host=True, local_player_ids=["player-0"])
        follower = SyncBridge(follower_session, store, "b1", is_host=False, local_player_ids=["player-1"])
        host.start()
        follower.start()

        assert await host.push_now()
        assert follower.revision == 1

        success, _ = await follower.submit_selection("player-1", "archer-2-1-0", "dummy-0")
        assert success
        assert host_session.state.selections["player-1"].ready
        assert host_session.state.phase == GamePhase.SELECT

        success, _ = await host.submit_selection("player-0", "archer-2-0-0", "dummy-0")
        assert success

        await host.close()
        await follower.close()
        return host_session.state, follower_session.state, store

    host_state, follower_state, store = asyncio.run(scenario())

    assert host_state.monsters[0].hp == 80
    assert follower_state.monsters[0].hp == 80
    assert follower_state.turn == host_state.turn == 2
    assert [p.hp for p in follower_state.players] == [25, 30]
    revision, _ = asyncio.run(store.read("battle:b1"))
    assert revision == 3


def test_followers_never_resolve(make_session):
    async def scenario():
        store = InMemoryStore()
        session = _session(make_session)
        follower = SyncBridge(session, store, "b2", is_host=False)
        await follower.submit_selection("player-0", "archer-2-0-0", "dummy-0")
        await follower.submit_selection("player-1", "archer-2-1-0", "dummy-0")
        return session.state

    state = asyncio.run(scenario())
    assert state.phase == GamePhase.SELECT
    assert state.monsters[0].hp == 100


def test_stale_write_is_logged_and_recovers(make_session, caplog):
    async def scenario():
        store = InMemoryStore()
        first = SyncBridge(_session(make_session), store, "b3", is_host=True)
        second = SyncBridge(_session(make_session), store, "b3", is_host=False)
        assert await first.push_now()
        with caplog.at_level(logging.ERROR, logger="dungeon_battler.sync"):
            rejected = await second.push_now()
        accepted = await second.push_now()
        return rejected, accepted, second.revision

    rejected, accepted, revision = asyncio.run(scenario())
    assert rejected is False
    assert "Failed to publish" in caplog.text
    assert accepted is True
    assert revision == 2


def test_scheduled_pushes_coalesce(make_session):
    async def scenario():
        store = InMemoryStore()
        bridge = SyncBridge(_session(make_session), store, "b4", is_host=True, config=SyncConfig(debounce_seconds=0))
        first = bridge.schedule_push()
        second = bridge.schedule_push()
        assert first is second
        assert await first
        return await store.read("battle:b4")

    revision, payload = asyncio.run(scenario())
    assert revision == 1
    assert payload["phase"] == "select"


def test_pull_and_malformed_notifications(make_session, caplog):
    async def scenario():
        store = InMemoryStore()
        host_session = _session(make_session)
        host_session.state.monsters[0].hp = 42
        host = SyncBridge(host_session, store, "b5", is_host=True)
        await host.push_now()

        late = SyncBridge(_session(make_session), store, "b5", is_host=False)
        assert await late.pull()
        with caplog.at_level(logging.ERROR, logger="dungeon_battler.sync"):
            await late.handle_remote(late.key, 9, {"bogus": True}, "someone-else")
        return late

    late = asyncio.run(scenario())
    assert late.session.state.monsters[0].hp == 42
    assert late.revision == 9
    assert "Ignoring malformed snapshot" in caplog.text
