"""
Domain Layer

Defines constants, entities, value objects and exceptions that form the core of the batch evaluation.
Has no dependencies on external libraries.
"""

from nlu_batch_gauge.domain.constants import (
    BATCH_SIZE,
    DEFAULT_BATCH_ENDPOINT,
    DEFAULT_TRANSIENT_DELAY_SECONDS,
    MAX_TRANSIENT_ATTEMPTS,
    OPERATION_STATUS_DELAY_SECONDS,
    STATUS_FAILED,
    STATUS_SUCCEEDED,
)
from nlu_batch_gauge.domain.entities import (
    Entity,
    LabeledUtterance,
)
from nlu_batch_gauge.domain.exceptions import (
    ArgumentError,
    BatchEvaluationError,
    EntityResolutionError,
    OperationCancelledError,
)
from nlu_batch_gauge.domain.value_objects import (
    EntityFinding,
    OperationStatus,
)

__all__ = [
    # constants
    "BATCH_SIZE",
    "DEFAULT_BATCH_ENDPOINT",
    "DEFAULT_TRANSIENT_DELAY_SECONDS",
    "MAX_TRANSIENT_ATTEMPTS",
    "OPERATION_STATUS_DELAY_SECONDS",
    "STATUS_FAILED",
    "STATUS_SUCCEEDED",
    # entities
    "Entity",
    "LabeledUtterance",
    # exceptions
    "ArgumentError",
    "BatchEvaluationError",
    "EntityResolutionError",
    "OperationCancelledError",
    # value objects
    "EntityFinding",
    "OperationStatus",
]
