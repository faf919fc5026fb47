"""
Referral reward descriptions and their effect on a client record.

Rewards are plain dicts ({type, value, description}) so they can be stored in
JSON columns as they were granted, independent of later settings changes.
"""

from typing import Any, Dict, Optional

from app.models.referral import RewardType


def describe_reward(reward_type: RewardType, value: int, currency: str = "CZK") -> str:
    reward_type = RewardType(reward_type)
    if reward_type == RewardType.CREDITS:
        return f"{value} free credit" if value == 1 else f"{value} free credits"
    if reward_type == RewardType.DISCOUNT:
        return f"{value}% off the next purchase"
    return f"{value} {currency} cash reward"


def build_reward(reward_type: RewardType, value: int, currency: str = "CZK") -> Optional[Dict[str, Any]]:
    """Reward granted by the tenant's settings, or None when the value is zero."""
    if not value:
        return None
    reward_type = RewardType(reward_type)
    return {
        "type": reward_type.value,
        "value": value,
        "description": describe_reward(reward_type, value, currency),
    }


def client_updates_for_reward(credits_balance: int, notes: Optional[str], reward: Dict[str, Any]) -> Dict[str, Any]:
    """
    Column updates that hand `reward` to a client.

    Credits are added to the balance, discounts are noted for the next
    purchase. Cash rewards change nothing on the client; they are paid out
    manually from the referral record.
    """
    reward_type = RewardType(reward["type"])
    if reward_type == RewardType.CREDITS:
        return {"credits_balance": (credits_balance or 0) + reward["value"]}
    if reward_type == RewardType.DISCOUNT:
        line = f"[Referral discount: {reward['value']}% off next purchase]"
        return {"notes": f"{notes}\n{line}" if notes else line}
    return {}
