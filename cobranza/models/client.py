"""Client and collector models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Cobrador:
    """Field collector responsible for a set of clients."""

    cobrador_id: str
    name: str
    assigned_manager_id: str | None = None


@dataclass
class Client:
    """Borrower entity."""

    client_id: str
    name: str
    phone: str | None = None
    client_category: str | None = None  # A, B, C
    assigned_cobrador_id: str | None = None
    created_at: datetime | None = None
