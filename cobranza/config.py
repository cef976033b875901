"""Settings for the engine, its data sources and its outputs.

Every section can be built from environment variables; unset or empty
variables keep the dataclass default.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cobranza.exceptions import ConfigurationError


def _env(name: str, default: str) -> str:
    return os.getenv(name) or default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if not raw:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """Accrual and delinquency policy."""

    # Period length for the ``custom`` frequency; 1 behaves like daily
    custom_period_days: int = 1
    # Overdue installments still classified as "warning"
    warning_max_installments: int = 3
    light_max_days: int = 7
    moderate_max_days: int = 30
    at_risk_completion_rate: float = 50.0
    currency: str = "Bs"

    def __post_init__(self) -> None:
        if self.custom_period_days < 1:
            raise ConfigurationError("custom_period_days must be at least 1")
        if self.warning_max_installments < 1:
            raise ConfigurationError("warning_max_installments must be at least 1")
        if not 0 <= self.light_max_days <= self.moderate_max_days:
            raise ConfigurationError("severity thresholds must satisfy 0 <= light <= moderate")
        if not 0 <= self.at_risk_completion_rate <= 100:
            raise ConfigurationError("at_risk_completion_rate must be between 0 and 100")

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            custom_period_days=_int_env("COBRANZA_CUSTOM_PERIOD_DAYS", 1),
            warning_max_installments=_int_env("COBRANZA_WARNING_MAX_INSTALLMENTS", 3),
            light_max_days=_int_env("COBRANZA_LIGHT_MAX_DAYS", 7),
            moderate_max_days=_int_env("COBRANZA_MODERATE_MAX_DAYS", 30),
            at_risk_completion_rate=_float_env("COBRANZA_AT_RISK_COMPLETION_RATE", 50.0),
            currency=_env("COBRANZA_CURRENCY", "Bs"),
        )


@dataclass
class KafkaConfig:
    """Producer settings and the alerts topic."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    batch_size: int = 16384
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic: str = "cobranza.credit-alerts"

    def to_dict(self) -> dict[str, Any]:
        """Settings in confluent-kafka (librdkafka) key format."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "batch.size": self.batch_size,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }

    @classmethod
    def from_env(cls) -> "KafkaConfig":
        return cls(
            bootstrap_servers=_env("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=_env("KAFKA_ACKS", "all"),
            topic=_env("KAFKA_ALERTS_TOPIC", "cobranza.credit-alerts"),
        )


@dataclass
class PostgresConfig:
    """Where the credit tables live."""

    host: str = "localhost"
    port: int = 5432
    database: str = "cobranza"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"

    @classmethod
    def from_env(cls) -> "PostgresConfig":
        return cls(
            host=_env("POSTGRES_HOST", "localhost"),
            port=_int_env("POSTGRES_PORT", 5432),
            database=_env("POSTGRES_DB", "cobranza"),
            user=_env("POSTGRES_USER", "postgres"),
            password=_env("POSTGRES_PASSWORD", "postgres"),
        )


@dataclass
class OutputConfig:
    """JSON report files."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False

    @classmethod
    def from_env(cls) -> "OutputConfig":
        return cls(
            json_output_dir=Path(_env("OUTPUT_DIR", "output")),
            pretty_json=_bool_env("PRETTY_JSON"),
        )


@dataclass
class CobranzaConfig:
    """All settings of a run."""

    engine: EngineConfig = field(default_factory=EngineConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "CobranzaConfig":
        """Read every section from the environment.

        Raises
        ------
        ConfigurationError
            If a numeric variable is not an integer or a policy value is out of range.
        """
        return cls(
            engine=EngineConfig.from_env(),
            kafka=KafkaConfig.from_env(),
            postgres=PostgresConfig.from_env(),
            output=OutputConfig.from_env(),
            log_level=_env("LOG_LEVEL", "INFO"),
            log_format=_env("LOG_FORMAT", "standard"),
        )
