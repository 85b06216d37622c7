"""
LUIS batch testing API client
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from nlu_batch_gauge.cancellation import CancellationToken
from nlu_batch_gauge.domain.constants import SUBSCRIPTION_KEY_HEADER
from nlu_batch_gauge.domain.value_objects import OperationStatus
from nlu_batch_gauge.harness_config import BatchConfig, LuisConfig
from nlu_batch_gauge.infrastructure.batch_clients.retry import on_transient_error

logger = logging.getLogger(__name__)


class LuisBatchClient:
    """Client for the LUIS batch testing (evaluations) API using httpx"""

    def __init__(
        self,
        luis_config: LuisConfig,
        batch_config: BatchConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            luis_config: LUIS configuration (endpoints and prediction key)
            batch_config: Retry and timeout settings (defaults if not specified)
            http_client: HTTP client to use (created and owned by this client if not specified)
        """
        self.luis_config = luis_config
        self.batch_config = batch_config or BatchConfig()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.batch_config.timeout_seconds)
        )

    async def __aenter__(self) -> "LuisBatchClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if it was created here"""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            SUBSCRIPTION_KEY_HEADER: self.luis_config.prediction_key,
        }

    async def _request_json(
        self,
        method: str,
        url: str,
        cancellation_token: CancellationToken | None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        async def _call():
            response = await self._client.request(
                method, url, headers=self._headers(), json=json_body
            )
            response.raise_for_status()
            return response.json()

        return await on_transient_error(
            _call,
            cancellation_token,
            max_attempts=self.batch_config.max_attempts,
            default_delay=self.batch_config.default_retry_delay_seconds,
        )

    async def create_evaluations_operation(
        self,
        batch_input: dict[str, Any],
        cancellation_token: CancellationToken | None = None,
    ) -> str:
        """
        Submit a batch of labeled utterances for evaluation

        Args:
            batch_input: {"LabeledTestSetUtterances": [...]} envelope
            cancellation_token: Cancellation token

        Returns:
            str: Operation ID assigned by the service
        """
        url = self.luis_config.batch_evaluation_endpoint()
        data = await self._request_json("POST", url, cancellation_token, json_body=batch_input)
        operation_id = data["operationId"]
        logger.debug("Created batch evaluation operation %s", operation_id)
        return operation_id

    async def get_evaluations_status(
        self,
        operation_id: str,
        cancellation_token: CancellationToken | None = None,
    ) -> OperationStatus:
        url = self.luis_config.batch_status_endpoint(operation_id)
        data = await self._request_json("GET", url, cancellation_token)
        return OperationStatus(
            status=data["status"],
            error_details=data.get("errorDetails"),
        )

    async def get_evaluations_result(
        self,
        operation_id: str,
        cancellation_token: CancellationToken | None = None,
    ) -> dict[str, Any]:
        url = self.luis_config.batch_result_endpoint(operation_id)
        return await self._request_json("GET", url, cancellation_token)
