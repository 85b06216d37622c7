"""
nlu-batch-gauge CLI Runner

Minimal CLI for testing an NLU model with the batch testing API.

Usage:
    python -m nlu_batch_gauge.runner --utterances tests/utterances.json
    python -m nlu_batch_gauge.runner --utterances tests/utterances.json --batch-size 100 --output-dir results
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from nlu_batch_gauge.cancellation import CancellationToken
from nlu_batch_gauge.domain.entities import LabeledUtterance
from nlu_batch_gauge.harness_config import HarnessConfig, load_config
from nlu_batch_gauge.infrastructure.batch_clients.factory import create_batch_client
from nlu_batch_gauge.use_cases.batch_evaluation import BatchTestClient
from nlu_batch_gauge.use_cases.reporting import (
    compare_outcomes,
    outcomes_to_dataframe,
    save_outcomes,
    summarize_comparison,
)
from nlu_batch_gauge.utterance_loader import load_utterances


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="nlu-batch-gauge: Test an NLU model with labeled utterances in batches",
    )
    parser.add_argument(
        "--utterances",
        required=True,
        help="Path to the labeled utterances JSON file",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Utterances per batch operation (default: BATCH_SIZE from .env, or 500)",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Run ID used in output file names (default: current timestamp)",
    )
    parser.add_argument(
        "--output-dir",
        default="results",
        help="Directory for output files (default: results)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser.parse_args(argv)


async def run_batch_evaluation(
    utterances: list[dict],
    config: HarnessConfig,
    cancellation_token: CancellationToken | None = None,
) -> list[LabeledUtterance]:
    """Evaluate utterances with the configured batch client, closing it afterwards."""
    batch_client = create_batch_client(config)
    try:
        client = BatchTestClient(config, batch_client)
        return await client.evaluate(utterances, cancellation_token)
    finally:
        await batch_client.aclose()


async def _run_with_interrupt(utterances: list[dict], config: HarnessConfig) -> list[LabeledUtterance]:
    cancellation_token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, cancellation_token.cancel)
    except NotImplementedError:
        # Signal handlers are unavailable on Windows event loops
        pass
    return await run_batch_evaluation(utterances, config, cancellation_token)


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, args.log_level.upper(), logging.INFO),
    )

    # Load config
    config = load_config()
    if args.batch_size:
        config.batch.batch_size = args.batch_size

    if not config.luis.use_batch:
        print("ERROR: Batch testing is disabled. Set LUIS_USE_BATCH_EXPERIMENTAL=true to enable it.")
        sys.exit(1)

    # Determine run_id
    run_id = args.run_id if args.run_id else datetime.now().strftime("%Y%m%d_%H%M%S")

    # Output paths
    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    results_path = output_dir / f"results_{run_id}.json"
    outcomes_path = output_dir / f"outcomes_{run_id}.csv"
    comparison_path = output_dir / f"comparison_{run_id}.csv"

    # Load utterances
    print(f"\n=== Loading utterances: {args.utterances} ===\n")
    utterances = load_utterances(args.utterances)
    print(f"  Utterances: {len(utterances)}")
    print(f"  Batch size: {config.batch.batch_size}")
    print(f"  Run ID: {run_id}")
    print()

    # Run evaluation
    print("=== Running Batch Evaluation ===\n")
    try:
        outcomes = asyncio.run(_run_with_interrupt(utterances, config))
    except asyncio.CancelledError:
        print("Cancelled.")
        sys.exit(130)

    save_outcomes(outcomes, results_path)
    print(f"  Results saved: {results_path}")

    outcomes_to_dataframe(outcomes).to_csv(outcomes_path, index=False)
    print(f"  Outcomes saved: {outcomes_path}")

    # Compare with expected labels
    comparison = compare_outcomes(utterances, outcomes)
    comparison.to_csv(comparison_path, index=False)
    print(f"  Comparison saved: {comparison_path}")

    summary = summarize_comparison(comparison)
    print("\n=== Summary ===\n")
    print(f"  Utterances: {summary['total']}")
    print(f"  Intent accuracy: {summary['intent_accuracy']:.2%}")
    print(f"  Entity accuracy: {summary['entity_accuracy']:.2%}")


if __name__ == "__main__":
    main()
