"""
backend/app/services/wager_ledger.py

Purpose:
    Back/lay wager lifecycle: stake validation, liability and potential-win
    computation, balance reservation on placement, refund on cancellation,
    and per-user listings and summaries.

    Balance policy: a user without a balance field is untracked and is never
    checked or debited. Tracked balances change only through conditional
    updates in UserRepository, so concurrent placements cannot overdraw.
    The debit runs before the bet insert; if the insert fails the debit is
    credited back.

Dependencies:
    - app.services.bet_repository
    - app.services.user_repository
    - app.errors
"""

import logging
import math
from typing import Any, Optional

from app.config import settings
from app.errors import InsufficientFundsError, NotFoundError, ValidationError
from app.models.bet import BetInDB, BetStatus, BetType
from app.services.bet_repository import BetRepository
from app.services.user_repository import UserRepository
from app.utils import utcnow

logger = logging.getLogger("bibet.wager_ledger")


def compute_exposure(bet_type: str, odds: float, stake: float) -> dict[str, float]:
    """Potential win and liability for a bet.

    back: potential_win = stake * (odds - 1), liability = 0
    lay:  potential_win = stake,             liability = stake * (odds - 1)
    """
    if bet_type == BetType.back.value:
        return {"potential_win": stake * (odds - 1), "liability": 0.0}
    return {"potential_win": stake, "liability": stake * (odds - 1)}


def amount_at_risk(bet_type: str, odds: float, stake: float) -> float:
    """What the bettor can lose: the stake for back bets, the liability for lay bets."""
    if bet_type == BetType.lay.value:
        return stake * (odds - 1)
    return stake


class WagerLedger:
    """Places, cancels and reports wagers against injected repositories."""

    def __init__(
        self,
        bets: Optional[BetRepository] = None,
        users: Optional[UserRepository] = None,
    ):
        self.bets = bets or BetRepository()
        self.users = users or UserRepository()

    async def place_bet(
        self,
        user_id: str,
        match_id: Optional[str],
        runner: Optional[str],
        bet_type: Optional[str],
        odds: Optional[float],
        stake: Optional[float],
        match_details: Optional[dict[str, Any]] = None,
    ) -> dict:
        if not match_id or not runner or not bet_type or not odds or not stake:
            raise ValidationError("All fields are required")
        if bet_type not in (BetType.back.value, BetType.lay.value):
            raise ValidationError("Bet type must be back or lay")
        odds = float(odds)
        stake = float(stake)
        if not math.isfinite(odds) or not math.isfinite(stake):
            raise ValidationError("Odds and stake must be finite numbers")
        if odds < 1:
            raise ValidationError("Odds must be at least 1")
        if stake < settings.MIN_STAKE:
            raise ValidationError(f"Minimum stake is {settings.MIN_STAKE:g}")
        if stake > settings.MAX_STAKE:
            raise ValidationError(f"Maximum stake is {settings.MAX_STAKE:,.0f}")

        user = await self.users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        now = utcnow()
        bet_doc = BetInDB(
            user_id=user_id,
            match_id=str(match_id),
            runner=runner,
            bet_type=bet_type,
            odds=odds,
            stake=stake,
            **compute_exposure(bet_type, odds, stake),
            status=BetStatus.pending,
            unmatched_amount=stake,
            placed_at=now,
            match_details=match_details,
            created_at=now,
            updated_at=now,
        ).model_dump()

        required = amount_at_risk(bet_type, odds, stake)
        tracked = user.get("balance") is not None
        if tracked:
            debited = await self.users.debit_balance(user_id, required)
            if debited is None:
                raise InsufficientFundsError("Insufficient balance")

        try:
            bet = await self.bets.insert(bet_doc)
        except Exception:
            if tracked:
                await self.users.credit_balance(user_id, required)
                logger.error(
                    "Bet insert failed, debit of %.2f returned to user=%s", required, user_id,
                )
            raise

        logger.info(
            "Bet placed: user=%s match=%s runner=%s type=%s odds=%.2f stake=%.2f risk=%.2f",
            user_id, match_id, runner, bet_type, odds, stake, required,
        )
        return bet

    async def cancel_bet(self, user_id: str, bet_id: str) -> dict:
        """Cancel an owned pending bet and refund its amount at risk.

        Returns the cancelled bet. Missing, foreign and non-pending bets are
        indistinguishable to the caller.
        """
        bet = await self.bets.cancel_pending(bet_id, user_id)
        if bet is None:
            raise NotFoundError("Bet not found or cannot be cancelled")

        refund = bet.get("liability", 0.0) if bet["bet_type"] == BetType.lay.value else bet["stake"]
        refunded = await self.users.credit_balance(user_id, refund)
        if refunded is None:
            logger.info("Bet cancelled without refund (balance untracked): bet=%s", bet_id)
        else:
            logger.info("Bet cancelled: bet=%s user=%s refund=%.2f", bet_id, user_id, refund)
        return bet

    async def get_user_bets(
        self, user_id: str, status: Optional[str] = None, match_id: Optional[str] = None,
    ) -> list[dict]:
        return await self.bets.find_for_user(
            user_id, status=status, match_id=match_id, limit=settings.MY_BETS_LIMIT,
        )

    async def get_betting_summary(self, user_id: str) -> dict:
        rows = await self.bets.summarize_by_status(user_id)
        user = await self.users.get_by_id(user_id)
        balance = (user or {}).get("balance") or 0
        return {
            "summary": [
                {
                    "status": row["_id"],
                    "count": row["count"],
                    "total_stake": row["total_stake"],
                    "total_payout": row["total_payout"],
                }
                for row in rows
            ],
            "balance": balance,
        }


_ledger_singleton: Optional[WagerLedger] = None


def get_wager_ledger() -> WagerLedger:
    global _ledger_singleton
    if _ledger_singleton is None:
        _ledger_singleton = WagerLedger()
    return _ledger_singleton
