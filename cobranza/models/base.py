"""Event envelope published for credits that need attention."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """An event about one credit.

    ``subject`` is the credit ID and doubles as the Kafka message key.
    """

    event_id: str
    event_type: str  # e.g. credit.requires_attention
    event_time: datetime
    source: str  # emitting module
    subject: str
    data: dict
    metadata: dict = field(default_factory=dict)
