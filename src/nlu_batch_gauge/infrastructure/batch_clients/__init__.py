"""
Batch client package

Provides the remote job clients for NLU batch testing APIs.
"""

from nlu_batch_gauge.infrastructure.batch_clients.base import BatchEvaluationClient
from nlu_batch_gauge.infrastructure.batch_clients.factory import create_batch_client
from nlu_batch_gauge.infrastructure.batch_clients.luis import LuisBatchClient
from nlu_batch_gauge.domain.value_objects import OperationStatus

__all__ = ["BatchEvaluationClient", "LuisBatchClient", "OperationStatus", "create_batch_client"]
