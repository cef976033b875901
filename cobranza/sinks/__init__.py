"""Output sinks for exporting report data."""

from cobranza.sinks.json_file import JsonFileSink
from cobranza.sinks.kafka import KafkaSink

__all__ = ["JsonFileSink", "KafkaSink"]
