"""
Result Reporting

Compares labeled utterances returned by a batch evaluation with the expected
labels and aggregates intent and entity accuracy.
"""

import json
from collections import Counter
from pathlib import Path

import pandas as pd

from nlu_batch_gauge.domain.entities import LabeledUtterance
from nlu_batch_gauge.use_cases.batch_evaluation import resolve_utterance


def outcomes_to_dataframe(outcomes: list[LabeledUtterance]) -> pd.DataFrame:
    """
    One row per labeled utterance.

    Args:
        outcomes: Labeled utterances from a batch evaluation

    Returns:
        pd.DataFrame: Columns text, intent, entity_count, entities (JSON)
    """
    rows = [
        {
            "text": outcome.text,
            "intent": outcome.intent,
            "entity_count": len(outcome.entities),
            "entities": json.dumps([e.to_dict() for e in outcome.entities], ensure_ascii=False),
        }
        for outcome in outcomes
    ]
    return pd.DataFrame(rows, columns=["text", "intent", "entity_count", "entities"])


def _expected_entity_keys(utterance: dict) -> Counter:
    resolved = resolve_utterance(utterance)
    text = resolved["text"]
    return Counter(
        (e["entity"], text[e["startPos"]:e["endPos"] + 1]) for e in resolved["entities"]
    )


def _actual_entity_keys(outcome: LabeledUtterance) -> Counter:
    return Counter((e.entity_type, e.match_text) for e in outcome.entities)


def compare_outcomes(
    expected: list[dict],
    outcomes: list[LabeledUtterance],
) -> pd.DataFrame:
    """
    Compare each labeled utterance with the expected utterance at the same position.

    Entities are compared as (entity type, matched text) multisets.

    Args:
        expected: Expected utterances (input JSON shape)
        outcomes: Labeled utterances from a batch evaluation

    Returns:
        pd.DataFrame: Comparison result per utterance

    Raises:
        ValueError: If the number of expected utterances and outcomes differ
    """
    if len(expected) != len(outcomes):
        raise ValueError(
            f"Expected {len(expected)} labeled utterances but received {len(outcomes)}."
        )

    rows = []
    for utterance, outcome in zip(expected, outcomes):
        expected_entities = _expected_entity_keys(utterance)
        actual_entities = _actual_entity_keys(outcome)
        rows.append({
            "text": utterance["text"],
            "expected_intent": utterance.get("intent"),
            "actual_intent": outcome.intent,
            "intent_match": utterance.get("intent") == outcome.intent,
            "expected_entities": sum(expected_entities.values()),
            "actual_entities": sum(actual_entities.values()),
            "entity_match": expected_entities == actual_entities,
        })

    return pd.DataFrame(rows, columns=[
        "text",
        "expected_intent",
        "actual_intent",
        "intent_match",
        "expected_entities",
        "actual_entities",
        "entity_match",
    ])


def summarize_comparison(comparison: pd.DataFrame) -> dict:
    """Aggregate a comparison DataFrame into accuracy metrics"""
    total = len(comparison)
    if total == 0:
        return {"total": 0, "intent_accuracy": 0.0, "entity_accuracy": 0.0}

    return {
        "total": total,
        "intent_accuracy": float(comparison["intent_match"].mean()),
        "entity_accuracy": float(comparison["entity_match"].mean()),
    }


def save_outcomes(outcomes: list[LabeledUtterance], path: Path) -> None:
    """Save labeled utterances as a JSON array in the utterance input shape."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([o.to_dict() for o in outcomes], f, ensure_ascii=False, indent=2)
