"""Custom exception hierarchy for cobranza."""


class CobranzaError(Exception):
    """Base exception for all cobranza errors."""


class EntityNotFoundError(CobranzaError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class DuplicateEntityError(CobranzaError):
    """Raised when an entity with the same ID is already stored."""


class MissingScheduleData(CobranzaError):
    """Raised when a credit lacks the schedule fields an operation needs.

    Callers must surface this as "not available" rather than as a number,
    since a zero would read as a fully repaid credit.
    """

    def __init__(self, credit_id: str, field_name: str = "total_installments") -> None:
        super().__init__(f"Credit {credit_id} has no {field_name}")
        self.credit_id = credit_id
        self.field_name = field_name


class ConfigurationError(CobranzaError):
    """Raised when configuration is invalid or missing."""


class RepositoryError(CobranzaError):
    """Raised when the persistence backend cannot be read."""


class SinkError(CobranzaError):
    """Raised when a sink operation fails."""
