"""Persistence collaborators for credits and payments."""

from cobranza.store.base import CreditRepository
from cobranza.store.memory import CreditStore

__all__ = ["CreditRepository", "CreditStore"]
