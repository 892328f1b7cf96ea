from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Execution
    default_timeout_seconds: float = 300.0
    cancel_on_timeout: bool = False  # Baseline leaves timed-out bodies running
    run_timeout_seconds: float | None = None

    # Retry
    retry_strategy: Literal["constant", "exponential"] = "constant"
    retry_delay_seconds: float = 2.0
    retry_backoff_factor: float = 2.0
    retry_max_delay_seconds: float = 30.0

    # Logging
    debug: bool = False
    log_json: bool = False

    model_config = {
        "env_prefix": "TASKFLOW_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
