"""Pydantic models for badge and level endpoints."""

from __future__ import annotations

from smartcharge.schemas import CamelModel


class BadgeResponse(CamelModel):
    id: int
    slug: str
    name: str
    icon: str
    description: str


class AllBadgesResponse(CamelModel):
    badges: list[BadgeResponse]


class LevelResponse(CamelModel):
    level: int
    title: str
    xp_into_level: int
    xp_for_level: int
    next_level: int
    next_title: str


class LevelEntry(CamelModel):
    level: int
    title: str
    xp_required: int
    cumulative: int


class AllLevelsResponse(CamelModel):
    levels: list[LevelEntry]
