"""
Batch Evaluation

Tests an NLU model with a set of labeled utterances through a batch testing API:
resolves entity spans, submits fixed-size batches one at a time, polls each
operation to completion and converts the results into labeled utterances.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Iterable
from typing import Any

from nlu_batch_gauge.cancellation import CancellationToken, sleep
from nlu_batch_gauge.domain.entities import Entity, LabeledUtterance
from nlu_batch_gauge.domain.exceptions import (
    ArgumentError,
    BatchEvaluationError,
    EntityResolutionError,
)
from nlu_batch_gauge.domain.value_objects import EntityFinding
from nlu_batch_gauge.enumerable import batch, select_async
from nlu_batch_gauge.harness_config import HarnessConfig
from nlu_batch_gauge.infrastructure.batch_clients.base import BatchEvaluationClient

# Batches are evaluated strictly one at a time to avoid overloading the service
BATCH_DEGREE_OF_PARALLELISM = 1


def find_occurrence(text: str, match_text: str, match_index: int = 0) -> int:
    """
    Find the start of the match_index-th (0-based) ordinal occurrence of match_text.

    Raises:
        EntityResolutionError: If there are not enough occurrences
    """
    if match_index < 0:
        raise EntityResolutionError(match_text, text, match_index)

    start = -1
    for _ in range(match_index + 1):
        start = text.find(match_text, start + 1)
        if start == -1:
            raise EntityResolutionError(match_text, text, match_index)
    return start


def count_occurrences_before(text: str, match_text: str, start: int) -> int:
    """Number of occurrences of match_text that begin before start (the match index of start)"""
    count = 0
    position = text.find(match_text)
    while position != -1 and position < start:
        count += 1
        position = text.find(match_text, position + 1)
    return count


def resolve_entity(text: str, entity: dict[str, Any]) -> dict[str, Any]:
    """
    Convert an entity annotation into the batch API's explicit span form.

    Annotations with a startPos keep their span; otherwise the span of the
    matchIndex-th occurrence of matchText is used. The entity type comes from
    "entity", falling back to "entityType".

    Args:
        text: Utterance text
        entity: Entity annotation

    Returns:
        dict: {"entity": ..., "startPos": ..., "endPos": ...}

    Raises:
        ArgumentError: If the annotation has neither a startPos nor a matchText
        EntityResolutionError: If matchText does not occur often enough in text
    """
    entity_type = entity.get("entity") or entity.get("entityType")
    if "startPos" not in entity and "matchText" not in entity:
        raise ArgumentError(
            "entities",
            f"Entity '{entity_type}' in '{text}' must have either a startPos or a matchText.",
        )
    if "startPos" in entity:
        return {
            "entity": entity_type,
            "startPos": entity["startPos"],
            "endPos": entity["endPos"],
        }

    match_text = entity["matchText"]
    start = find_occurrence(text, match_text, entity.get("matchIndex", 0))
    return {
        "entity": entity_type,
        "startPos": start,
        "endPos": start + len(match_text) - 1,
    }


def resolve_utterance(utterance: dict[str, Any]) -> dict[str, Any]:
    """Build the batch API form of an utterance. The input is left unmodified."""
    text = utterance["text"]
    return {
        "text": text,
        "intent": utterance.get("intent"),
        "entities": [resolve_entity(text, entity) for entity in utterance.get("entities") or []],
    }


def create_batch_input(utterances: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap resolved utterances in the submission envelope"""
    return {"LabeledTestSetUtterances": utterances}


def _finding_key(finding: EntityFinding) -> tuple[str, int, int]:
    return finding.entity_name, finding.start_char_index, finding.end_char_index


def _to_entity(text: str, finding: EntityFinding) -> Entity:
    match_text = text[finding.start_char_index:finding.end_char_index + 1]
    return Entity(
        entity_type=finding.entity_name,
        match_text=match_text,
        match_index=count_occurrences_before(text, match_text, finding.start_char_index),
    )


def batch_result_to_labeled_utterances(
    submitted: list[dict[str, Any]],
    batch_result: dict[str, Any],
) -> list[LabeledUtterance]:
    """
    Convert a batch evaluation result into labeled utterances.

    The predicted entities of an utterance are its labeled entities, minus the
    false negatives, plus the false positives. Only entities whose model
    appears in entityModelsStats are kept.

    Args:
        submitted: Resolved utterances of the batch, in submission order
        batch_result: Result returned by the batch testing API

    Returns:
        list[LabeledUtterance]: One labeled utterance per utterancesStats record

    Raises:
        ValueError: If the number of utterancesStats records differs from the batch size
    """
    model_names = {
        model["modelName"] for model in batch_result.get("entityModelsStats") or []
    }

    utterances_stats = batch_result.get("utterancesStats") or []
    if len(utterances_stats) != len(submitted):
        raise ValueError(
            f"Batch result contains {len(utterances_stats)} utterance records "
            f"but {len(submitted)} utterances were submitted."
        )

    results = []
    for index, stats in enumerate(utterances_stats):
        text = stats["text"]
        labeled = submitted[index]["entities"]
        false_negatives = {
            _finding_key(EntityFinding.from_dict(f)) for f in stats.get("falseNegativeEntities") or []
        }

        findings: list[EntityFinding] = []
        for entity in labeled:
            finding = EntityFinding(entity["entity"], entity["startPos"], entity["endPos"])
            if _finding_key(finding) not in false_negatives:
                findings.append(finding)
        seen = {_finding_key(f) for f in findings}
        for data in stats.get("falsePositiveEntities") or []:
            finding = EntityFinding.from_dict(data)
            if _finding_key(finding) not in seen:
                findings.append(finding)
                seen.add(_finding_key(finding))

        results.append(LabeledUtterance(
            text=text,
            intent=stats.get("predictedIntentName"),
            entities=[_to_entity(text, f) for f in findings if f.entity_name in model_names],
        ))

    return results


class BatchTestClient:
    """Tests an NLU model with batches of labeled utterances"""

    def __init__(
        self,
        config: HarnessConfig,
        batch_client: BatchEvaluationClient,
        logger: logging.Logger | None = None,
    ):
        """
        Args:
            config: HarnessConfig (batch mode flag, batch size and poll interval)
            batch_client: Remote job client for the batch testing API
            logger: Logger for progress messages (module logger if not specified)

        Raises:
            ArgumentError: If config or batch_client is None
        """
        if config is None:
            raise ArgumentError("config", "config must not be None.")
        if batch_client is None:
            raise ArgumentError("batch_client", "batch_client must not be None.")

        self.config = config
        self.batch_client = batch_client
        self.logger = logger or logging.getLogger(__name__)

    @property
    def is_batch_enabled(self) -> bool:
        return self.config.luis.use_batch

    def evaluate(
        self,
        utterances: Iterable[dict[str, Any]],
        cancellation_token: CancellationToken | None = None,
    ) -> Awaitable[list[LabeledUtterance]]:
        """
        Test the NLU model with a set of labeled utterances.

        Arguments are validated and entity spans resolved before anything is
        awaited, so a bad utterance set fails without any network call.

        Args:
            utterances: Utterances with text, intent and entities
            cancellation_token: Token to cancel the evaluation

        Returns:
            Awaitable resolving to one LabeledUtterance per utterance, in input order

        Raises:
            ArgumentError: If utterances is None
            EntityResolutionError: If an entity's match text cannot be found
        """
        if utterances is None:
            raise ArgumentError("utterances", "utterances must not be None.")

        resolved = [resolve_utterance(utterance) for utterance in utterances]
        return self._evaluate(resolved, cancellation_token)

    async def _evaluate(
        self,
        resolved: list[dict[str, Any]],
        cancellation_token: CancellationToken | None,
    ) -> list[LabeledUtterance]:
        chunks = list(batch(resolved, self.config.batch.batch_size))
        self.logger.info(
            "Evaluating %d utterances in %d batches", len(resolved), len(chunks)
        )

        batch_results = await select_async(
            chunks,
            lambda chunk: self._evaluate_batch(chunk, cancellation_token),
            BATCH_DEGREE_OF_PARALLELISM,
        )

        labeled_utterances = []
        for chunk, batch_result in zip(chunks, batch_results):
            labeled_utterances.extend(batch_result_to_labeled_utterances(chunk, batch_result))
        return labeled_utterances

    async def _evaluate_batch(
        self,
        chunk: list[dict[str, Any]],
        cancellation_token: CancellationToken | None,
    ) -> dict[str, Any]:
        """Submit one batch, poll until it succeeds and fetch its result"""
        if cancellation_token is not None:
            cancellation_token.raise_if_cancellation_requested()

        operation_id = await self.batch_client.create_evaluations_operation(
            create_batch_input(chunk), cancellation_token
        )
        self.logger.info("Submitted %d utterances as operation %s", len(chunk), operation_id)

        while True:
            status = await self.batch_client.get_evaluations_status(operation_id, cancellation_token)
            if status.succeeded:
                break
            if status.failed:
                raise BatchEvaluationError(operation_id, status.status, status.error_details)

            self.logger.debug("Operation %s is %s", operation_id, status.status)
            await sleep(self.config.batch.poll_interval_seconds, cancellation_token)

        return await self.batch_client.get_evaluations_result(operation_id, cancellation_token)
