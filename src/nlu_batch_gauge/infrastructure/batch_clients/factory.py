"""
Batch client factory

Creates the batch evaluation client for the configured provider.
"""

from __future__ import annotations

import httpx

from nlu_batch_gauge.harness_config import HarnessConfig, load_config
from nlu_batch_gauge.infrastructure.batch_clients.luis import LuisBatchClient


def create_batch_client(
    config: HarnessConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> LuisBatchClient:
    """
    Create the batch evaluation client

    Args:
        config: HarnessConfig (loads from env if not provided)
        http_client: Shared HTTP client (optional)

    Returns:
        LuisBatchClient: The client instance
    """
    if config is None:
        config = load_config()

    return LuisBatchClient(config.luis, batch_config=config.batch, http_client=http_client)
