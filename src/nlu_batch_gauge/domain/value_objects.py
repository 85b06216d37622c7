"""
Domain Value Objects

Defines immutable values exchanged with the batch testing API.
"""

from dataclasses import dataclass

from nlu_batch_gauge.domain.constants import STATUS_FAILED, STATUS_SUCCEEDED


@dataclass(frozen=True)
class OperationStatus:
    """Status of a batch evaluation operation"""
    status: str
    error_details: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED


@dataclass(frozen=True)
class EntityFinding:
    """Entity span reported in the batch evaluation statistics (inclusive end)"""
    entity_name: str
    start_char_index: int
    end_char_index: int

    @classmethod
    def from_dict(cls, data: dict) -> "EntityFinding":
        return cls(
            entity_name=data["entityName"],
            start_char_index=int(data["startCharIndex"]),
            end_char_index=int(data["endCharIndex"]),
        )
