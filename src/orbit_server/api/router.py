from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from orbit_sim.domain.errors import EngineFault
from orbit_sim.domain.types import BurnIntensity, Facing, SubsystemType, WEAPON_TYPES
from orbit_sim.rules.scenario import ScenarioError
from orbit_sim.sim.resolver import resolve
from orbit_sim.view.preview import firing_preview, project_post_movement
from orbit_server.api import mappers, schemas
from orbit_server.session import GameSession, create_game, drop_game, get_game

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _require_game(game_id: str) -> GameSession:
    session = get_game(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown game: {game_id}")
    return session


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/games", response_model=schemas.GameStateResponse)
async def new_game(payload: Optional[schemas.CreateGameRequest] = None):
    try:
        game_id, session = create_game(payload.scenario if payload is not None else None)
    except ScenarioError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    async with session.lock:
        return mappers.build_state_response(game_id, session.state)


@router.get("/games/{game_id}", response_model=schemas.GameStateResponse)
async def get_state(game_id: str):
    session = _require_game(game_id)
    async with session.lock:
        return mappers.build_state_response(game_id, session.state)


@router.delete("/games/{game_id}")
async def delete_game(game_id: str):
    session = _require_game(game_id)
    async with session.lock:
        drop_game(game_id)
    return {"ok": True}


@router.post("/games/{game_id}/turn", response_model=schemas.TurnResponse)
async def submit_turn(game_id: str, payload: schemas.TurnRequest):
    session = _require_game(game_id)
    actions = [mappers.to_domain_action(request) for request in payload.actions]
    async with session.lock:
        try:
            result = resolve(session.state, actions)
        except EngineFault as exc:
            logger.error("Engine fault in game %s: %s", game_id, exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        if result.ok:
            session.state = result.state
        return mappers.build_turn_response(game_id, result)


@router.get("/games/{game_id}/firing-solutions", response_model=schemas.FiringSolutionsResponse)
async def firing_solutions(
    game_id: str,
    player_id: str = Query(..., alias="playerId"),
    weapon: str = Query(...),
):
    session = _require_game(game_id)
    try:
        weapon_type = SubsystemType(weapon)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Unknown weapon: {weapon}") from exc
    if weapon_type not in WEAPON_TYPES:
        raise HTTPException(status_code=422, detail=f"{weapon} is not a weapon")
    async with session.lock:
        if session.state.player(player_id) is None:
            raise HTTPException(status_code=404, detail=f"Unknown player: {player_id}")
        solutions = firing_preview(session.state, player_id, weapon_type)
        return mappers.build_firing_solutions(weapon_type, solutions)


@router.post("/games/{game_id}/preview", response_model=schemas.PositionView)
async def preview_movement(game_id: str, payload: schemas.PreviewRequest):
    session = _require_game(game_id)
    async with session.lock:
        player = session.state.player(payload.player_id)
        if player is None:
            raise HTTPException(status_code=404, detail=f"Unknown player: {payload.player_id}")
        projected = project_post_movement(
            player.ship,
            session.state.rules,
            facing=Facing(payload.facing) if payload.facing else None,
            burn=BurnIntensity(payload.burn) if payload.burn else None,
            sector_adjustment=payload.sector_adjustment,
        )
        return mappers.build_position(projected)
