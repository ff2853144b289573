"""Goal attainment, tier ("patente") and risk flag rules.

All functions here are total: malformed input degrades to the least
favourable defined outcome instead of raising.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.db import models


class Tier(models.TextChoices):
    DIAMOND = "diamante", "Diamante"
    PLATINUM = "platina", "Platina"
    GOLD = "ouro", "Ouro"
    SILVER = "prata", "Prata"
    BRONZE = "bronze", "Bronze"


class RiskFlag(models.TextChoices):
    YELLOW = "amarelo", "Atenção"
    ORANGE = "laranja", "Alerta"
    RED = "vermelho", "Crítico"


@dataclass(frozen=True)
class TierInfo:
    tier: Tier
    label: str
    icon: str
    phrase: str
    min_percent: int
    rank: int

    def as_dict(self) -> dict:
        data = asdict(self)
        data["tier"] = self.tier.value
        return data


# Highest first; resolve_tier() returns the first entry the percentage reaches.
TIER_TABLE: tuple[TierInfo, ...] = (
    TierInfo(Tier.DIAMOND, "Diamante", "💎", "Desempenho lendário! Você é a referência do time.", 200, 5),
    TierInfo(Tier.PLATINUM, "Platina", "🔘", "Incrível! Você superou todas as expectativas.", 150, 4),
    TierInfo(Tier.GOLD, "Ouro", "🥇", "Meta batida! Excelente trabalho, continue assim.", 100, 3),
    TierInfo(Tier.SILVER, "Prata", "🥈", "Está muito perto! Faltam poucos detalhes.", 90, 2),
    TierInfo(Tier.BRONZE, "Bronze", "🥉", "Continue acelerando, o ouro é logo ali.", 80, 1),
)

GENERIC_PHRASE = "Foco total! Cada esforço conta."

BRONZE_THRESHOLD = min(info.min_percent for info in TIER_TABLE)
ORANGE_STREAK = 2
RED_STREAK = 3

_TIERS_BY_ID = {info.tier: info for info in TIER_TABLE}


def _to_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value))
    except (ArithmeticError, TypeError, ValueError):
        return None
    return number if number.is_finite() else None


def round_half_up(value) -> int:
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_attainment(revenue, goal) -> int:
    """Revenue as a whole percentage of ``goal``; 0 when the goal is not positive."""
    goal_value = _to_decimal(goal)
    if goal_value is None or goal_value <= 0:
        return 0
    revenue_value = _to_decimal(revenue)
    if revenue_value is None or revenue_value <= 0:
        return 0
    return round_half_up(revenue_value * 100 / goal_value)


def resolve_tier(percentage) -> TierInfo | None:
    """Highest tier whose minimum ``percentage`` meets, or None."""
    value = _to_decimal(percentage)
    if value is None:
        return None
    for info in TIER_TABLE:
        if value >= info.min_percent:
            return info
    return None


def tier_info(tier) -> TierInfo | None:
    if tier in (None, ""):
        return None
    try:
        return _TIERS_BY_ID.get(Tier(tier))
    except ValueError:
        return None


def tier_rank(tier) -> int:
    """Ordering key for a Tier, TierInfo or None (no tier ranks 0)."""
    if isinstance(tier, TierInfo):
        return tier.rank
    info = tier_info(tier)
    return info.rank if info else 0


def motivational_phrase(percentage) -> str:
    info = resolve_tier(percentage)
    return info.phrase if info else GENERIC_PHRASE


def _clamp_streak(value) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    number = _to_decimal(value)
    if number is None or number != number.to_integral_value() or number < 0:
        return 0
    return int(number)


def resolve_risk_flag(percentage, consecutive_below) -> RiskFlag | None:
    """Escalate on the streak of sub-Bronze periods first, then on the current reading."""
    streak = _clamp_streak(consecutive_below)
    if streak >= RED_STREAK:
        return RiskFlag.RED
    if streak >= ORANGE_STREAK:
        return RiskFlag.ORANGE
    current = _to_decimal(percentage)
    if current is None or current < BRONZE_THRESHOLD:
        return RiskFlag.YELLOW
    return None
