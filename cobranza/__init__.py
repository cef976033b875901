"""Installment accrual and delinquency engine for credit collection."""

from cobranza.engine.accrual import AccrualEngine
from cobranza.exceptions import MissingScheduleData
from cobranza.service import CreditEngineService

__all__ = ["AccrualEngine", "CreditEngineService", "MissingScheduleData"]

__version__ = "0.1.0"
