"""
Tests for harness_config.py
"""

import os
from unittest.mock import patch

import pytest

from nlu_batch_gauge.domain.constants import DEFAULT_BATCH_ENDPOINT
from nlu_batch_gauge.harness_config import (
    BatchConfig,
    HarnessConfig,
    LuisConfig,
    load_config,
)

ENV_KEYS = [
    "LUIS_APP_ID",
    "LUIS_VERSION_ID",
    "LUIS_VERSION_PREFIX",
    "BUILD_BUILDID",
    "LUIS_SLOT_NAME",
    "LUIS_IS_STAGING",
    "LUIS_DIRECT_VERSION_PUBLISH",
    "LUIS_ENDPOINT_KEY",
    "LUIS_AUTHORING_KEY",
    "LUIS_USE_BATCH_EXPERIMENTAL",
    "LUIS_BATCH_ENDPOINT_EXPERIMENTAL",
    "BATCH_SIZE",
    "BATCH_POLL_INTERVAL_SECONDS",
    "BATCH_MAX_ATTEMPTS",
    "BATCH_RETRY_DELAY_SECONDS",
    "BATCH_TIMEOUT_SECONDS",
]


@pytest.fixture
def clean_env():
    """Environment without any of the configuration variables"""
    env = {k: v for k, v in os.environ.items() if k not in ENV_KEYS}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestLuisConfig:
    """Tests for LuisConfig"""

    def test_slot_defaults(self):
        assert LuisConfig().effective_slot_name == "Production"
        assert LuisConfig(is_staging=True).effective_slot_name == "Staging"
        assert LuisConfig(slot_name="Custom", is_staging=True).effective_slot_name == "Custom"

    def test_prediction_key_fallback(self):
        assert LuisConfig(endpoint_key="e", authoring_key="a").prediction_key == "e"
        assert LuisConfig(authoring_key="a").prediction_key == "a"

    def test_prediction_key_missing(self):
        with pytest.raises(ValueError, match="LUIS_AUTHORING_KEY"):
            LuisConfig().prediction_key

    def test_slot_endpoints(self):
        config = LuisConfig(app_id="app", batch_endpoint="https://batch.test/apps")

        assert config.batch_evaluation_endpoint() == "https://batch.test/apps/app/slots/Production/evaluations"
        assert config.batch_status_endpoint("op") == "https://batch.test/apps/app/slots/Production/evaluations/op/status"
        assert config.batch_result_endpoint("op") == "https://batch.test/apps/app/slots/Production/evaluations/op/result"

    def test_version_endpoint(self):
        config = LuisConfig(app_id="app", version_id="2.0", direct_version_publish=True)
        assert config.batch_evaluation_endpoint() == f"{DEFAULT_BATCH_ENDPOINT}app/versions/2.0/evaluations"

    def test_missing_app_id(self):
        with pytest.raises(ValueError, match="LUIS_APP_ID"):
            LuisConfig().batch_evaluation_endpoint()


class TestHarnessConfig:
    """Tests for HarnessConfig"""

    def test_round_trip(self):
        config = HarnessConfig(
            luis=LuisConfig(app_id="app", use_batch=True),
            batch=BatchConfig(batch_size=100),
        )
        data = config.to_dict()

        assert data["harness_config"]["batch"]["batch_size"] == 100
        assert HarnessConfig.from_dict(data) == config

    def test_from_dict_without_wrapper(self):
        config = HarnessConfig.from_dict({"batch": {"poll_interval_seconds": 0.5}})
        assert config.batch.poll_interval_seconds == 0.5
        assert config.luis == LuisConfig()


class TestLoadConfig:
    """Tests for load_config()"""

    def test_defaults(self, clean_env):
        config = load_config()

        assert config.luis.app_id is None
        assert config.luis.version_id == "0.1.1"
        assert config.luis.use_batch is False
        assert config.luis.batch_endpoint == DEFAULT_BATCH_ENDPOINT
        assert config.batch == BatchConfig()
        assert config.batch.batch_size == 500
        assert config.batch.poll_interval_seconds == 2.0
        assert config.batch.max_attempts == 5

    def test_reads_environment(self, clean_env):
        with patch.dict(os.environ, {
            "LUIS_APP_ID": "app",
            "LUIS_VERSION_ID": "9.9",
            "LUIS_IS_STAGING": "true",
            "LUIS_ENDPOINT_KEY": "key",
            "LUIS_USE_BATCH_EXPERIMENTAL": "1",
            "LUIS_BATCH_ENDPOINT_EXPERIMENTAL": "https://batch.test/apps/",
            "BATCH_SIZE": "50",
            "BATCH_POLL_INTERVAL_SECONDS": "0.25",
            "BATCH_MAX_ATTEMPTS": "3",
        }):
            config = load_config()

        assert config.luis.app_id == "app"
        assert config.luis.version_id == "9.9"
        assert config.luis.effective_slot_name == "Staging"
        assert config.luis.prediction_key == "key"
        assert config.luis.use_batch is True
        assert config.luis.batch_endpoint == "https://batch.test/apps/"
        assert config.batch.batch_size == 50
        assert config.batch.poll_interval_seconds == 0.25
        assert config.batch.max_attempts == 3

    def test_version_from_build_id(self, clean_env):
        with patch.dict(os.environ, {"LUIS_VERSION_PREFIX": "1.0", "BUILD_BUILDID": "42"}):
            assert load_config().luis.version_id == "1.0.42"

    def test_version_prefix_without_build_id(self, clean_env):
        with patch.dict(os.environ, {"LUIS_VERSION_PREFIX": "1.0"}):
            assert load_config().luis.version_id == "0.1.1"

    def test_invalid_int(self, clean_env):
        with patch.dict(os.environ, {"BATCH_SIZE": "many"}):
            with pytest.raises(ValueError, match="BATCH_SIZE"):
                load_config()

    def test_invalid_float(self, clean_env):
        with patch.dict(os.environ, {"BATCH_POLL_INTERVAL_SECONDS": "soon"}):
            with pytest.raises(ValueError, match="BATCH_POLL_INTERVAL_SECONDS"):
                load_config()
