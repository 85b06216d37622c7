"""
Use Cases Layer

Aggregates business logic and provides use cases called from the runner.
"""

from nlu_batch_gauge.use_cases.batch_evaluation import (
    BatchTestClient,
    batch_result_to_labeled_utterances,
    create_batch_input,
    resolve_entity,
    resolve_utterance,
)
from nlu_batch_gauge.use_cases.reporting import (
    compare_outcomes,
    outcomes_to_dataframe,
    save_outcomes,
    summarize_comparison,
)

__all__ = [
    # batch_evaluation
    "BatchTestClient",
    "batch_result_to_labeled_utterances",
    "create_batch_input",
    "resolve_entity",
    "resolve_utterance",
    # reporting
    "compare_outcomes",
    "outcomes_to_dataframe",
    "save_outcomes",
    "summarize_comparison",
]
