"""
Tests for use_cases/reporting.py
"""

import json

import pytest

from nlu_batch_gauge.domain.entities import Entity, LabeledUtterance
from nlu_batch_gauge.use_cases.reporting import (
    compare_outcomes,
    outcomes_to_dataframe,
    save_outcomes,
    summarize_comparison,
)

EXPECTED = [
    {
        "text": "book a flight to Paris",
        "intent": "BookFlight",
        "entities": [{"entity": "city", "matchText": "Paris"}],
    },
    {"text": "hello", "intent": "Greeting", "entities": []},
]


class TestOutcomesToDataframe:
    """Tests for outcomes_to_dataframe()"""

    def test_one_row_per_outcome(self):
        outcomes = [
            LabeledUtterance("book a flight to Paris", "BookFlight", [Entity("city", "Paris")]),
            LabeledUtterance("hello", None),
        ]

        df = outcomes_to_dataframe(outcomes)

        assert list(df.columns) == ["text", "intent", "entity_count", "entities"]
        assert len(df) == 2
        assert df.iloc[0]["entity_count"] == 1
        assert json.loads(df.iloc[0]["entities"]) == [
            {"entity": "city", "matchText": "Paris", "matchIndex": 0}
        ]
        assert df.iloc[1]["entity_count"] == 0

    def test_empty(self):
        df = outcomes_to_dataframe([])
        assert df.empty
        assert list(df.columns) == ["text", "intent", "entity_count", "entities"]


class TestCompareOutcomes:
    """Tests for compare_outcomes() and summarize_comparison()"""

    def test_all_match(self):
        outcomes = [
            LabeledUtterance("book a flight to Paris", "BookFlight", [Entity("city", "Paris")]),
            LabeledUtterance("hello", "Greeting"),
        ]

        comparison = compare_outcomes(EXPECTED, outcomes)

        assert comparison["intent_match"].tolist() == [True, True]
        assert comparison["entity_match"].tolist() == [True, True]
        assert summarize_comparison(comparison) == {
            "total": 2,
            "intent_accuracy": 1.0,
            "entity_accuracy": 1.0,
        }

    def test_mismatches(self):
        outcomes = [
            LabeledUtterance("book a flight to Paris", "BookFlight", []),
            LabeledUtterance("hello", "None"),
        ]

        comparison = compare_outcomes(EXPECTED, outcomes)

        assert comparison["intent_match"].tolist() == [True, False]
        assert comparison["entity_match"].tolist() == [False, True]
        assert comparison.iloc[0]["expected_entities"] == 1
        assert comparison.iloc[0]["actual_entities"] == 0

        summary = summarize_comparison(comparison)
        assert summary["intent_accuracy"] == pytest.approx(0.5)
        assert summary["entity_accuracy"] == pytest.approx(0.5)

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="Expected 2 labeled utterances but received 0"):
            compare_outcomes(EXPECTED, [])

    def test_summarize_empty(self):
        summary = summarize_comparison(compare_outcomes([], []))
        assert summary == {"total": 0, "intent_accuracy": 0.0, "entity_accuracy": 0.0}


class TestSaveOutcomes:
    """Tests for save_outcomes()"""

    def test_writes_json(self, tmp_path):
        path = tmp_path / "nested" / "results.json"
        outcomes = [LabeledUtterance("hello", "Greeting", [Entity("greeting", "hello")])]

        save_outcomes(outcomes, path)

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data == [{
            "text": "hello",
            "intent": "Greeting",
            "entities": [{"entity": "greeting", "matchText": "hello", "matchIndex": 0}],
        }]
