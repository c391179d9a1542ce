"""Reward amounts for bookings and settlement."""

from __future__ import annotations

GREEN_BASE_COINS = 50
STANDARD_BASE_COINS = 10

GREEN_CO2_KG = 2.5
STANDARD_CO2_KG = 0.5

# Settlement credits these unless the caller supplies overrides. They do not
# reuse the reservation's own earned_coins, campaign bonus included.
DEFAULT_SETTLEMENT_COINS = 50
DEFAULT_SETTLEMENT_XP = 50


def base_reward(is_green: bool) -> int:
    return GREEN_BASE_COINS if is_green else STANDARD_BASE_COINS


def co2_credit(is_green: bool) -> float:
    return GREEN_CO2_KG if is_green else STANDARD_CO2_KG
