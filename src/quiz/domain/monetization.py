from enum import Enum

from pydantic import BaseModel

from src.config import GameConfig


class PremiumFeature(str, Enum):
    AD_FREE = "ad_free"
    UNLIMITED_PLAY = "unlimited_play"
    DETAILED_STATS = "detailed_stats"
    PRIORITY_SUPPORT = "priority_support"


class AdPlacement(str, Enum):
    RESULT_INTERSTITIAL = "result_interstitial"
    DAILY_BONUS_REWARDED = "daily_bonus_rewarded"
    START_BANNER = "start_banner"
    EXTRA_PLAY_REWARDED = "extra_play_rewarded"


class AdConfig(BaseModel):
    type: str  # interstitial | rewarded | banner
    frequency: int | None = None
    reward: str | None = None


class PremiumPlan(BaseModel):
    id: str
    name: str
    price: int  # JPY
    period: str  # monthly | yearly | lifetime
    features: list[PremiumFeature]


AD_PLACEMENTS: dict[AdPlacement, AdConfig] = {
    AdPlacement.RESULT_INTERSTITIAL: AdConfig(
        type="interstitial", frequency=GameConfig.INTERSTITIAL_FREQUENCY
    ),
    AdPlacement.DAILY_BONUS_REWARDED: AdConfig(type="rewarded", reward="+1 session"),
    AdPlacement.START_BANNER: AdConfig(type="banner"),
    AdPlacement.EXTRA_PLAY_REWARDED: AdConfig(
        type="rewarded", reward="Reset today's limit"
    ),
}

PREMIUM_PLANS: list[PremiumPlan] = [
    PremiumPlan(
        id="monthly_basic",
        name="Pitch Master (monthly)",
        price=480,
        period="monthly",
        features=[PremiumFeature.AD_FREE, PremiumFeature.UNLIMITED_PLAY],
    ),
    PremiumPlan(
        id="monthly_pro",
        name="Pitch Pro (monthly)",
        price=980,
        period="monthly",
        features=[
            PremiumFeature.AD_FREE,
            PremiumFeature.UNLIMITED_PLAY,
            PremiumFeature.DETAILED_STATS,
        ],
    ),
    PremiumPlan(
        id="yearly_pro",
        name="Pitch Pro (yearly)",
        price=7800,
        period="yearly",
        features=[
            PremiumFeature.AD_FREE,
            PremiumFeature.UNLIMITED_PLAY,
            PremiumFeature.DETAILED_STATS,
        ],
    ),
]


def get_plan(plan_id: str | None) -> PremiumPlan | None:
    return next((p for p in PREMIUM_PLANS if p.id == plan_id), None)


def has_feature(plan_id: str | None, feature: PremiumFeature) -> bool:
    plan = get_plan(plan_id)
    return plan is not None and feature in plan.features


def can_start_session(attempts_used: int, plan_id: str | None = None) -> bool:
    if has_feature(plan_id, PremiumFeature.UNLIMITED_PLAY):
        return True
    return attempts_used < GameConfig.MAX_DAILY_ATTEMPTS


def should_show_interstitial(
    sessions_completed: int, plan_id: str | None = None
) -> bool:
    if has_feature(plan_id, PremiumFeature.AD_FREE):
        return False
    frequency = AD_PLACEMENTS[AdPlacement.RESULT_INTERSTITIAL].frequency or 1
    return sessions_completed > 0 and sessions_completed % frequency == 0
