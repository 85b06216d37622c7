"""
nlu-batch-gauge

Batch evaluation of NLU models against labeled test utterances.
"""

from nlu_batch_gauge.cancellation import CancellationToken
from nlu_batch_gauge.domain.entities import Entity, LabeledUtterance
from nlu_batch_gauge.harness_config import HarnessConfig, load_config
from nlu_batch_gauge.use_cases.batch_evaluation import BatchTestClient

__all__ = [
    "BatchTestClient",
    "CancellationToken",
    "Entity",
    "HarnessConfig",
    "LabeledUtterance",
    "load_config",
]
