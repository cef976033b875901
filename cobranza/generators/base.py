"""Seeded randomness shared by the sample data generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker


class BaseGenerator(ABC):
    """Own a Faker instance and a ``random.Random`` seeded together.

    With the same seed two generators produce the same names, phones,
    amounts and identifiers.
    """

    def __init__(self, seed: int | None = None, locale: str = "es_MX") -> None:
        self.rng = random.Random(seed)
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)

    def new_id(self) -> str:
        """32 hex characters drawn from ``rng`` (reproducible, unlike uuid4)."""
        return format(self.rng.getrandbits(128), "032x")
