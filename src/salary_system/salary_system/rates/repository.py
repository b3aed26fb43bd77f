from __future__ import annotations

from typing import Protocol

from .model import RateConfiguration


class RateRepository(Protocol):
    def load(self) -> RateConfiguration:
        """Read package rates, tiers and engine flags in one go."""

        raise NotImplementedError
