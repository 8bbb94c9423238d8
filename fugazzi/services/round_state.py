"""Round State tracking for Fugazzi.

Owns the live gems, the player's balance and the pending selection, and
resolves each call into a balance change and (on a wrong call) game over.
Every operation returns a TransitionResult describing what happened; the
transient flash/message signals live there rather than in the renderer.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
from enum import Enum
import logging
import math

from .formatting import format_currency
from .population import Gem, PopulationGenerator

logger = logging.getLogger(__name__)


class RoundPhase(str, Enum):
    ACTIVE = "active"
    ITEM_SELECTED = "item_selected"
    OVER = "over"


class Flash(str, Enum):
    """Transient play-field signal after a resolved call."""
    SUCCESS = "success"
    FAIL = "fail"


class Outcome(str, Enum):
    SELECTED = "selected"
    CANCELLED = "cancelled"
    REAL_CONFIRMED = "real_confirmed"
    FUGAZZI_CONFIRMED = "fugazzi_confirmed"
    WRONG_CALL = "wrong_call"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_SELECTION = "invalid_selection"
    REROLLED = "rerolled"
    RESTARTED = "restarted"
    BALANCE_RESET = "balance_reset"


@dataclass
class TransitionResult:
    """What a single state-machine operation did."""
    outcome: Outcome
    flash: Optional[Flash] = None
    message: Optional[str] = None
    balance_delta: int = 0
    reward: int = 0

    @property
    def balance_changed(self) -> bool:
        # Net-zero calls and resets still wrote the balance
        return self.balance_delta != 0 or self.outcome in (
            Outcome.REAL_CONFIRMED,
            Outcome.FUGAZZI_CONFIRMED,
            Outcome.WRONG_CALL,
            Outcome.BALANCE_RESET,
        )


@dataclass
class Round:
    """Current state of a round."""
    items: List[Gem] = field(default_factory=list)
    balance: int = 200
    selected_index: Optional[int] = None
    last_outcome_message: Optional[str] = None
    last_flash: Optional[Flash] = None
    is_over: bool = False

    @property
    def phase(self) -> RoundPhase:
        if self.is_over:
            return RoundPhase.OVER
        if self.selected_index is not None:
            return RoundPhase.ITEM_SELECTED
        return RoundPhase.ACTIVE


BalanceListener = Callable[[int], None]


class RoundStateMachine:
    """State machine driving one player's rounds.

    Balance persists across restarts; only reset_balance() restores the
    starting value. The optional balance listener is called with the new
    balance after every mutation (a deduction and a credit are reported
    separately, deduction first). It is meant for renderers that animate
    intermediate balances; storage should save once per transition using
    TransitionResult.balance_changed, as the rounds API does.
    """

    STARTING_BALANCE = 200
    ROUND_SIZE = 7
    FUGAZZI_PAYOUT = 2

    def __init__(
        self,
        generator: Optional[PopulationGenerator] = None,
        balance: Optional[int] = None,
        starting_balance: int = STARTING_BALANCE,
        round_size: int = ROUND_SIZE,
        on_balance_change: Optional[BalanceListener] = None,
    ):
        self.generator = generator or PopulationGenerator()
        self.starting_balance = starting_balance
        self.round_size = round_size
        self.on_balance_change = on_balance_change
        self.round = Round(balance=starting_balance if balance is None else balance)

    # Read-only views for the renderer

    @property
    def items(self) -> List[Gem]:
        return self.round.items

    @property
    def balance(self) -> int:
        return self.round.balance

    @property
    def selected_index(self) -> Optional[int]:
        return self.round.selected_index

    @property
    def is_over(self) -> bool:
        return self.round.is_over

    @property
    def phase(self) -> RoundPhase:
        return self.round.phase

    # Transitions

    def initialize(self) -> TransitionResult:
        """Replace the gems with a fresh population and clear the selection."""
        self.round.items = self.generator.generate(self.round_size)
        self.round.selected_index = None
        logger.info(f"Round populated with {len(self.round.items)} gems")
        return TransitionResult(outcome=Outcome.REROLLED)

    def reroll(self) -> TransitionResult:
        return self.initialize()

    def select(self, index: int) -> TransitionResult:
        """Mark a gem as pending confirmation if the player can afford it."""
        if self.round.is_over or not self._in_range(index):
            return TransitionResult(outcome=Outcome.INVALID_SELECTION)

        gem = self.round.items[index]
        if self.round.balance < gem.base_cost:
            message = f"Insufficient funds! Need {format_currency(gem.base_cost, show_cents=False)}"
            self.round.last_outcome_message = message
            return TransitionResult(outcome=Outcome.INSUFFICIENT_FUNDS, message=message)

        self.round.selected_index = index
        return TransitionResult(outcome=Outcome.SELECTED)

    def confirm_real(self, index: int) -> TransitionResult:
        """Buy the selected gem as genuine. Buying a Fugazzi ends the game."""
        if not self._is_pending(index):
            return TransitionResult(outcome=Outcome.INVALID_SELECTION)

        gem = self.round.items[index]
        self.round.selected_index = None
        self._adjust_balance(-gem.base_cost)

        if gem.is_fake:
            return self._wrong_call(gem, "You bought a Fugazzi!")

        reward = math.floor(gem.base_cost * gem.reward_multiplier)
        self._adjust_balance(reward)
        return self._resolve(
            index, Outcome.REAL_CONFIRMED, reward,
            f"+{format_currency(reward)}",
        )

    def confirm_fake(self, index: int) -> TransitionResult:
        """Call the selected gem a Fugazzi. A correct call pays double the cost."""
        if not self._is_pending(index):
            return TransitionResult(outcome=Outcome.INVALID_SELECTION)

        gem = self.round.items[index]
        self.round.selected_index = None
        self._adjust_balance(-gem.base_cost)

        if not gem.is_fake:
            return self._wrong_call(gem, "That gem was real!")

        reward = gem.base_cost * self.FUGAZZI_PAYOUT
        self._adjust_balance(reward)
        return self._resolve(
            index, Outcome.FUGAZZI_CONFIRMED, reward,
            f"+{format_currency(reward)} (Fugazzi Bonus!)",
        )

    def cancel_selection(self) -> TransitionResult:
        if self.round.selected_index is None:
            return TransitionResult(outcome=Outcome.INVALID_SELECTION)
        self.round.selected_index = None
        return TransitionResult(outcome=Outcome.CANCELLED)

    def restart(self) -> TransitionResult:
        """Leave game over with a fresh population. Balance is kept."""
        self.round.is_over = False
        self.round.last_outcome_message = None
        self.round.last_flash = None
        self.initialize()
        logger.info(f"Round restarted with balance {self.round.balance}")
        return TransitionResult(outcome=Outcome.RESTARTED)

    def reset_balance(self) -> TransitionResult:
        """Restore the starting balance without touching gems or game over."""
        delta = self.starting_balance - self.round.balance
        self.round.balance = self.starting_balance
        self.round.last_outcome_message = None
        self._notify()
        return TransitionResult(outcome=Outcome.BALANCE_RESET, balance_delta=delta)

    # Internals

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self.round.items)

    def _is_pending(self, index: int) -> bool:
        return (
            not self.round.is_over
            and self.round.selected_index is not None
            and self.round.selected_index == index
            and self._in_range(index)
        )

    def _adjust_balance(self, amount: int):
        self.round.balance += amount
        self._notify()

    def _notify(self):
        if self.on_balance_change is not None:
            self.on_balance_change(self.round.balance)

    def _resolve(self, index: int, outcome: Outcome, reward: int, message: str) -> TransitionResult:
        gem = self.round.items.pop(index)
        self.round.last_outcome_message = message
        self.round.last_flash = Flash.SUCCESS
        logger.info(
            f"{outcome.value}: {gem.risk_tier.value} gem cost {gem.base_cost}, "
            f"reward {reward}, balance {self.round.balance}"
        )
        return TransitionResult(
            outcome=outcome,
            flash=Flash.SUCCESS,
            message=message,
            balance_delta=reward - gem.base_cost,
            reward=reward,
        )

    def _wrong_call(self, gem: Gem, headline: str) -> TransitionResult:
        self.round.is_over = True
        self.round.last_flash = Flash.FAIL
        message = f"{headline} Final Balance: {format_currency(self.round.balance)}"
        self.round.last_outcome_message = message
        logger.info(
            f"Wrong call on {gem.risk_tier.value} gem (fake={gem.is_fake}), "
            f"game over at balance {self.round.balance}"
        )
        return TransitionResult(
            outcome=Outcome.WRONG_CALL,
            flash=Flash.FAIL,
            message=message,
            balance_delta=-gem.base_cost,
        )
