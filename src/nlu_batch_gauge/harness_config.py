"""
Batch Evaluation Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, field, asdict

from nlu_batch_gauge.domain.constants import (
    BATCH_SIZE,
    DEFAULT_BATCH_ENDPOINT,
    DEFAULT_TRANSIENT_DELAY_SECONDS,
    MAX_TRANSIENT_ATTEMPTS,
    OPERATION_STATUS_DELAY_SECONDS,
)

DEFAULT_VERSION_ID = "0.1.1"


def _env_bool(key: str, default: bool) -> bool:
    """Convert an environment variable to bool"""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_str(key: str, default: str | None) -> str | None:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


def _env_version_id() -> str:
    """Explicit version ID, else '{prefix}.{build id}', else the default version"""
    version_id = os.environ.get("LUIS_VERSION_ID")
    if version_id is not None:
        return version_id

    prefix = os.environ.get("LUIS_VERSION_PREFIX")
    build_id = os.environ.get("BUILD_BUILDID")
    if prefix is None or build_id is None:
        return DEFAULT_VERSION_ID
    return f"{prefix}.{build_id}"


@dataclass
class LuisConfig:
    """LUIS application and batch testing endpoint configuration"""
    app_id: str | None = None
    version_id: str = DEFAULT_VERSION_ID
    slot_name: str | None = None  # Falls back to Staging/Production
    is_staging: bool = False
    direct_version_publish: bool = False
    endpoint_key: str | None = None
    authoring_key: str | None = None
    use_batch: bool = False
    batch_endpoint: str = DEFAULT_BATCH_ENDPOINT

    @property
    def effective_slot_name(self) -> str:
        if self.slot_name:
            return self.slot_name
        return "Staging" if self.is_staging else "Production"

    @property
    def prediction_key(self) -> str:
        """Key attached to every batch request (endpoint key, falling back to the authoring key)"""
        key = self.endpoint_key or self.authoring_key
        if key is None:
            raise ValueError(
                "Configuration value for one of 'LUIS_ENDPOINT_KEY' or 'LUIS_AUTHORING_KEY' must be supplied."
            )
        return key

    def batch_evaluation_endpoint(self) -> str:
        """URL for creating batch evaluation operations"""
        if not self.app_id:
            raise ValueError("Configuration value for 'LUIS_APP_ID' must be supplied.")

        base = self.batch_endpoint if self.batch_endpoint.endswith("/") else f"{self.batch_endpoint}/"
        if self.direct_version_publish:
            return f"{base}{self.app_id}/versions/{self.version_id}/evaluations"
        return f"{base}{self.app_id}/slots/{self.effective_slot_name}/evaluations"

    def batch_status_endpoint(self, operation_id: str) -> str:
        """URL for the status of a batch evaluation operation"""
        return f"{self.batch_evaluation_endpoint()}/{operation_id}/status"

    def batch_result_endpoint(self, operation_id: str) -> str:
        """URL for the result of a batch evaluation operation"""
        return f"{self.batch_evaluation_endpoint()}/{operation_id}/result"


@dataclass
class BatchConfig:
    """Batch orchestration configuration"""
    batch_size: int = BATCH_SIZE
    poll_interval_seconds: float = OPERATION_STATUS_DELAY_SECONDS
    max_attempts: int = MAX_TRANSIENT_ATTEMPTS
    default_retry_delay_seconds: float = DEFAULT_TRANSIENT_DELAY_SECONDS
    timeout_seconds: int = 120


@dataclass
class HarnessConfig:
    """Overall batch evaluation configuration"""
    luis: LuisConfig = field(default_factory=LuisConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"harness_config": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "HarnessConfig":
        """Create from dictionary (handles presence/absence of harness_config key)"""
        config_data = data.get("harness_config", data)
        luis = LuisConfig(**config_data.get("luis", {}))
        batch = BatchConfig(**config_data.get("batch", {}))
        return cls(luis=luis, batch=batch)


def load_config() -> HarnessConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set.

    Returns:
        HarnessConfig
    """
    luis = LuisConfig(
        app_id=_env_str("LUIS_APP_ID", None),
        version_id=_env_version_id(),
        slot_name=_env_str("LUIS_SLOT_NAME", None),
        is_staging=_env_bool("LUIS_IS_STAGING", False),
        direct_version_publish=_env_bool("LUIS_DIRECT_VERSION_PUBLISH", False),
        endpoint_key=_env_str("LUIS_ENDPOINT_KEY", None),
        authoring_key=_env_str("LUIS_AUTHORING_KEY", None),
        use_batch=_env_bool("LUIS_USE_BATCH_EXPERIMENTAL", False),
        batch_endpoint=_env_str("LUIS_BATCH_ENDPOINT_EXPERIMENTAL", DEFAULT_BATCH_ENDPOINT),
    )
    batch = BatchConfig(
        batch_size=_env_int("BATCH_SIZE", BATCH_SIZE),
        poll_interval_seconds=_env_float("BATCH_POLL_INTERVAL_SECONDS", OPERATION_STATUS_DELAY_SECONDS),
        max_attempts=_env_int("BATCH_MAX_ATTEMPTS", MAX_TRANSIENT_ATTEMPTS),
        default_retry_delay_seconds=_env_float("BATCH_RETRY_DELAY_SECONDS", DEFAULT_TRANSIENT_DELAY_SECONDS),
        timeout_seconds=_env_int("BATCH_TIMEOUT_SECONDS", 120),
    )
    return HarnessConfig(luis=luis, batch=batch)
