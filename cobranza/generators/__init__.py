"""Synthetic data generators."""

from cobranza.generators.base import BaseGenerator
from cobranza.generators.credit import PortfolioGenerator

__all__ = ["BaseGenerator", "PortfolioGenerator"]
