from fastapi import APIRouter, Depends, HTTPException, Request
from collections import OrderedDict
from typing import Callable, Optional, Union
from uuid import uuid4
from dataclasses import dataclass
import logging
import random

from ...config import get_settings
from ...schemas.rounds import (
    GemPosition, GemResponse, RoundCreate, RoundStateResponse,
    TransitionResponse, RoundActionResponse
)
from ...services.formatting import format_currency, format_percentage, risk_color
from ...services.balance_store import InMemoryBalanceRepository, SqlBalanceRepository
from ...services.population import PopulationGenerator
from ...services.round_state import RoundStateMachine, TransitionResult

logger = logging.getLogger(__name__)

router = APIRouter()


@dataclass
class GameSession:
    """A player's live game, kept in memory for the life of the process."""
    id: str
    balance_key: str
    machine: RoundStateMachine


# Live games for this process, oldest first; the oldest is dropped past max_sessions
_sessions: "OrderedDict[str, GameSession]" = OrderedDict()

BalanceRepository = Union[SqlBalanceRepository, InMemoryBalanceRepository]


def get_balances(request: Request) -> BalanceRepository:
    """Dependency for the balance repository chosen at startup."""
    return request.app.state.balances


def _remember(session: GameSession, max_sessions: int):
    _sessions[session.id] = session
    while len(_sessions) > max_sessions:
        evicted, _ = _sessions.popitem(last=False)
        logger.info(f"Evicted round {evicted}")


def _balance_key(player: Optional[str]) -> str:
    key = get_settings().balance_key
    return f"{key}:{player}" if player else key


def _get_session(session_id: str) -> GameSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Round not found")
    return session


def _round_state(session: GameSession) -> RoundStateResponse:
    machine = session.machine
    state = machine.round
    return RoundStateResponse(
        session_id=session.id,
        balance=state.balance,
        balance_label=format_currency(state.balance),
        phase=state.phase.value,
        is_over=state.is_over,
        selected_index=state.selected_index,
        last_outcome_message=state.last_outcome_message,
        flash=state.last_flash.value if state.last_flash else None,
        items=[
            GemResponse(
                index=i,
                asset_id=gem.asset_id,
                base_cost=gem.base_cost,
                risk_tier=gem.risk_tier.value,
                reward_multiplier=gem.reward_multiplier,
                position=GemPosition(x=gem.position.x, y=gem.position.y),
                rotation=gem.rotation,
                scale=gem.scale,
                price_label=format_currency(gem.base_cost, show_cents=False),
                return_label=format_percentage(gem.reward_multiplier),
                risk_color=risk_color(gem.risk_tier),
                affordable=state.balance >= gem.base_cost,
            )
            for i, gem in enumerate(state.items)
        ],
    )


async def _run_action(
    balances: BalanceRepository,
    session_id: str,
    action: Callable[[RoundStateMachine], TransitionResult],
) -> RoundActionResponse:
    """Apply a transition and persist the balance if it was written."""
    session = _get_session(session_id)
    result = action(session.machine)

    if result.balance_changed:
        try:
            await balances.save(session.balance_key, session.machine.balance)
        except Exception as e:
            logger.warning(f"Could not persist balance for {session.balance_key}: {e}")

    return RoundActionResponse(
        result=TransitionResponse(
            outcome=result.outcome.value,
            flash=result.flash.value if result.flash else None,
            message=result.message,
            balance_delta=result.balance_delta,
            reward=result.reward,
        ),
        round=_round_state(session),
    )


@router.post("/", response_model=RoundStateResponse)
async def create_round(
    config: Optional[RoundCreate] = None,
    balances: BalanceRepository = Depends(get_balances),
):
    """Start a game session, seeding the balance from storage."""
    settings = get_settings()
    balance_key = _balance_key(config.player if config else None)
    balance = await balances.load(balance_key, settings.starting_balance)

    rng = random.Random(settings.random_seed)
    machine = RoundStateMachine(
        generator=PopulationGenerator(rng=rng),
        balance=balance,
        starting_balance=settings.starting_balance,
        round_size=settings.round_size,
    )
    machine.initialize()

    session = GameSession(id=str(uuid4()), balance_key=balance_key, machine=machine)
    _remember(session, settings.max_sessions)
    logger.info(f"Created round {session.id} for {balance_key} with balance {balance}")
    return _round_state(session)


@router.get("/{session_id}", response_model=RoundStateResponse)
async def get_round(session_id: str):
    return _round_state(_get_session(session_id))


@router.post("/{session_id}/select/{index}", response_model=RoundActionResponse)
async def select_gem(
    session_id: str,
    index: int,
    balances: BalanceRepository = Depends(get_balances),
):
    """Select a gem for purchase (blocked when the balance cannot cover it)."""
    return await _run_action(balances, session_id, lambda m: m.select(index))


@router.post("/{session_id}/confirm-real/{index}", response_model=RoundActionResponse)
async def confirm_real(
    session_id: str,
    index: int,
    balances: BalanceRepository = Depends(get_balances),
):
    """Buy the selected gem as genuine."""
    return await _run_action(balances, session_id, lambda m: m.confirm_real(index))


@router.post("/{session_id}/confirm-fake/{index}", response_model=RoundActionResponse)
async def confirm_fake(
    session_id: str,
    index: int,
    balances: BalanceRepository = Depends(get_balances),
):
    """Make the Fugazzi call on the selected gem."""
    return await _run_action(balances, session_id, lambda m: m.confirm_fake(index))


@router.post("/{session_id}/cancel", response_model=RoundActionResponse)
async def cancel_selection(
    session_id: str,
    balances: BalanceRepository = Depends(get_balances),
):
    return await _run_action(balances, session_id, lambda m: m.cancel_selection())


@router.post("/{session_id}/reroll", response_model=RoundActionResponse)
async def reroll(
    session_id: str,
    balances: BalanceRepository = Depends(get_balances),
):
    return await _run_action(balances, session_id, lambda m: m.reroll())


@router.post("/{session_id}/restart", response_model=RoundActionResponse)
async def restart(
    session_id: str,
    balances: BalanceRepository = Depends(get_balances),
):
    return await _run_action(balances, session_id, lambda m: m.restart())


@router.post("/{session_id}/reset-balance", response_model=RoundActionResponse)
async def reset_balance(
    session_id: str,
    balances: BalanceRepository = Depends(get_balances),
):
    return await _run_action(balances, session_id, lambda m: m.reset_balance())
