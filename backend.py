"""FastAPI backend powering the Dungeon Battler UI."""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from dungeon_battler import (
    CatalogError,
    ClassType,
    CombatConfig,
    ContentCatalog,
    EliteModifier,
    EventScheduler,
    GameSession,
    GameSpeed,
    HeroSpec,
    HeuristicAgent,
    MonsterSpec,
    PlayMode,
    to_snapshot,
)
from dungeon_battler.events import CombatEvent

logger = logging.getLogger(__name__)

app = FastAPI(title="Dungeon Battler API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HeroRequest(BaseModel):
    class_type: str
    card_ids: List[str] = Field(default_factory=list)
    name: Optional[str] = None
    hp: Optional[int] = None
    champion_id: Optional[str] = None


class MonsterRequest(BaseModel):
    template_id: str
    level: int = 1
    elite: Optional[str] = None


class MockBattleRequest(BaseModel):
    heroes: List[HeroRequest]
    monsters: List[MonsterRequest]
    environment: Optional[str] = None
    mode: str = "sequential"
    speed: str = "instant"
    seed: Optional[int] = None


class CreateBattleRequest(BaseModel):
    heroes: List[HeroRequest]
    campaign_id: Optional[str] = None
    mode: str = "sequential"
    speed: str = "instant"
    seed: Optional[int] = None


class ActionRequest(BaseModel):
    battle_id: str
    player_id: Optional[str] = None
    action: Dict[str, Any]


def _enum_value(enum_cls, value: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {enum_cls.__name__}: {value}")


def _speed(value: str) -> GameSpeed:
    try:
        return GameSpeed[value.upper()]
    except KeyError:
        raise HTTPException(status_code=400, detail=f"Invalid speed: {value}")


def _hero_specs(heroes: List[HeroRequest]) -> List[HeroSpec]:
    if not heroes:
        raise HTTPException(status_code=400, detail="At least one hero is required")
    return [
        HeroSpec(
            class_type=_enum_value(ClassType, hero.class_type),
            card_ids=hero.card_ids,
            name=hero.name,
            hp=hero.hp,
            champion_id=hero.champion_id,
        )
        for hero in heroes
    ]


class BattleManager:
    """Keeps track of running battles and websocket subscribers."""

    def __init__(self) -> None:
        self.active_battles: Dict[str, GameSession] = {}
        self.connections: Dict[str, List[WebSocket]] = defaultdict(list)
        self.agent = HeuristicAgent()
        self.catalog = ContentCatalog()

    def _new_session(self, mode: str, speed: str, seed: Optional[int]) -> GameSession:
        config = CombatConfig(mode=_enum_value(PlayMode, mode), speed=_speed(speed), seed=seed)
        return GameSession(config, self.catalog)

    def _register(self, session: GameSession) -> str:
        battle_id = str(uuid.uuid4())
        self.active_battles[battle_id] = session
        logger.info("Battle %s created in %s mode", battle_id, session.mode.value)
        return battle_id

    def create_mock_battle(self, request: MockBattleRequest) -> str:
        session = self._new_session(request.mode, request.speed, request.seed)
        monsters = [
            MonsterSpec(m.template_id, m.level, _enum_value(EliteModifier, m.elite) if m.elite else None)
            for m in request.monsters
        ]
        try:
            session.start_mock_battle(_hero_specs(request.heroes), monsters, request.environment)
        except CatalogError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return self._register(session)

    def create_battle(self, request: CreateBattleRequest) -> str:
        session = self._new_session(request.mode, request.speed, request.seed)
        try:
            session.start_game(_hero_specs(request.heroes), request.campaign_id)
        except CatalogError as exc:
            raise HTTPException(status_code=404, detail=str(exc))
        return self._register(session)

    def get_battle(self, battle_id: str) -> GameSession:
        session = self.active_battles.get(battle_id)
        if not session:
            raise HTTPException(status_code=404, detail="Battle not found")
        return session

    def serialize(self, battle_id: str) -> Dict[str, Any]:
        session = self.get_battle(battle_id)
        state = to_snapshot(session.state).model_dump(mode="json")
        state["battle_id"] = battle_id
        return state

    async def broadcast(self, battle_id: str, payload: Dict[str, Any]) -> None:
        recipients = self.connections.get(battle_id, [])
        dead: List[WebSocket] = []
        for ws in recipients:
            try:
                await ws.send_json(payload)
            except WebSocketDisconnect:
                dead.append(ws)
            except RuntimeError:
                logger.debug("Dropping closed websocket on %s", battle_id)
                dead.append(ws)
        for ws in dead:
            recipients.remove(ws)

    async def stream_events(self, battle_id: str) -> int:
        session = self.get_battle(battle_id)

        async def sink(event: CombatEvent) -> None:
            await self.broadcast(
                battle_id,
                {
                    "type": "event",
                    "kind": event.kind.value,
                    "message": event.message,
                    "target_id": event.target_id,
                    "value": event.value,
                },
            )

        return await EventScheduler(session.config.speed, sink).drain(session.state)

    async def apply_action(self, battle_id: str, player_id: Optional[str], action: Dict[str, Any]) -> Dict[str, Any]:
        session = self.get_battle(battle_id)
        action_type = action.get("type")
        driver = session.sequential
        simultaneous = session.simultaneous
        result: Dict[str, Any] = {"success": False, "message": "Unknown action"}

        if action_type == "select_card":
            success, message = driver.select_card(action.get("card_id", ""))
            result = {"success": success, "message": message}
        elif action_type == "enhance":
            driver.set_enhance_mode(bool(action.get("enabled", True)))
            result = {"success": True, "message": "Enhance mode updated"}
        elif action_type == "confirm_card":
            success, message = driver.confirm_card()
            result = {"success": success, "message": message}
        elif action_type == "select_target":
            success, message = driver.select_target(action.get("target_id", ""))
            result = {"success": success, "message": message}
        elif action_type == "confirm_target":
            success, message = driver.confirm_target()
            result = {"success": success, "message": message}
        elif action_type == "cancel_target":
            success, message = driver.cancel_target()
            result = {"success": success, "message": message}
        elif action_type == "play":
            success, message = driver.play_turn(
                action.get("card_id", ""), action.get("target_id"), bool(action.get("enhance", False))
            )
            result = {"success": success, "message": message}
        elif action_type == "special":
            success, message = driver.use_special_ability(action.get("target_id"))
            result = {"success": success, "message": message}
        elif action_type == "pass":
            success, message = driver.pass_turn()
            result = {"success": success, "message": message}
        elif action_type == "select":
            success, message = simultaneous.set_selection(
                player_id or "", action.get("card_id"), action.get("target_id"), bool(action.get("enhance", False))
            )
            result = {"success": success, "message": message}
        elif action_type == "ready":
            success, message = simultaneous.set_ready(player_id or "", bool(action.get("ready", True)))
            result = {"success": success, "message": message}
        elif action_type == "resolve":
            success = simultaneous.resolve_all_actions(is_host=True)
            result = {"success": success, "message": "Resolved" if success else "Not everyone is ready"}
        elif action_type == "choose_reward":
            success, message = session.choose_reward(player_id or "", action.get("card_id", ""))
            result = {"success": success, "message": message}
        elif action_type == "buy":
            success, message = session.buy_card(player_id or "", action.get("card_id", ""))
            result = {"success": success, "message": message}
        elif action_type == "skip":
            success, message = session.skip_reward(player_id or "")
            result = {"success": success, "message": message}
        elif action_type == "next_quest":
            success, message = session.start_next_quest()
            result = {"success": success, "message": message}

        await self.stream_events(battle_id)
        await self.broadcast(
            battle_id,
            {
                "type": "action_result",
                "action": action,
                "result": result,
                "battle_state": self.serialize(battle_id),
            },
        )
        return result

    async def ai_turn(self, battle_id: str) -> Dict[str, Any]:
        session = self.get_battle(battle_id)
        if session.mode == PlayMode.SEQUENTIAL:
            success, message = self.agent.play_active(session)
        else:
            submitted = self.agent.submit_all(session)
            success = session.simultaneous.resolve_all_actions(is_host=True)
            message = f"Submitted {submitted} selections"
        await self.stream_events(battle_id)
        await self.broadcast(
            battle_id,
            {
                "type": "ai_turn_complete",
                "battle_state": self.serialize(battle_id),
            },
        )
        return {"success": success, "message": message}


manager = BattleManager()


@app.post("/api/battle/mock")
async def create_mock_battle(request: MockBattleRequest) -> Dict[str, Any]:
    battle_id = manager.create_mock_battle(request)
    await manager.stream_events(battle_id)
    return {"battle_id": battle_id, "battle_state": manager.serialize(battle_id)}


@app.post("/api/battle/create")
async def create_battle(request: CreateBattleRequest) -> Dict[str, Any]:
    battle_id = manager.create_battle(request)
    await manager.stream_events(battle_id)
    return {"battle_id": battle_id, "battle_state": manager.serialize(battle_id)}


@app.get("/api/battle/{battle_id}")
async def get_battle(battle_id: str) -> Dict[str, Any]:
    return manager.serialize(battle_id)


@app.post("/api/battle/action")
async def execute_action(request: ActionRequest) -> Dict[str, Any]:
    return await manager.apply_action(request.battle_id, request.player_id, request.action)


@app.post("/api/battle/{battle_id}/ai-turn")
async def ai_turn(battle_id: str) -> Dict[str, Any]:
    return await manager.ai_turn(battle_id)


@app.get("/api/cards")
async def get_cards() -> Dict[str, Any]:
    db = manager.catalog.cards
    return {
        "cards": [
            {
                "id": card.id,
                "name": card.name,
                "class": card.class_type.value,
                "rarity": card.rarity.label,
                "aggro": card.aggro,
                "description": card.description,
            }
            for card in db.all_cards
        ],
        "classes": [cls.value for cls in ClassType],
        "rarities": sorted({card.rarity.label for card in db.all_cards}),
    }


@app.websocket("/ws/battle/{battle_id}")
async def websocket_endpoint(websocket: WebSocket, battle_id: str) -> None:
    await websocket.accept()
    if battle_id not in manager.active_battles:
        await websocket.send_json({"type": "error", "message": "Battle not found"})
        await websocket.close()
        return
    manager.connections[battle_id].append(websocket)
    await websocket.send_json({"type": "connected", "battle_state": manager.serialize(battle_id)})

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        if websocket in manager.connections[battle_id]:
            manager.connections[battle_id].remove(websocket)


@app.get("/")
async def root() -> Dict[str, Any]:
    return {
        "name": "Dungeon Battler API",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "websocket": "/ws/battle/{battle_id}",
            "mock_battle": "POST /api/battle/mock",
            "create_battle": "POST /api/battle/create",
            "cards": "GET /api/cards",
        },
    }


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
