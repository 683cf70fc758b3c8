"""Marketplace actors (users and vendors) and their trust fields."""

from trustlens.actors.repository import ActorRepository
from trustlens.actors.schemas import (
    VALID_ACTOR_KINDS,
    VALID_RISK_LEVELS,
    Actor,
    ActorKind,
    RiskLevel,
    SellerRef,
)

__all__ = [
    "Actor",
    "ActorKind",
    "ActorRepository",
    "RiskLevel",
    "SellerRef",
    "VALID_ACTOR_KINDS",
    "VALID_RISK_LEVELS",
]
