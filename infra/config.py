import os
from pathlib import Path
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

load_dotenv()

class ScribeConfig(BaseModel):
    openai_api_key: str = Field(
        ...,
        description="OpenAI API key (REQUIRED)"
    )

    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the OpenAI-compatible API"
    )

    vision_model: str = Field(
        default="gpt-4o",
        description="Vision-capable chat model used for transcription"
    )

    max_dimension: int = Field(
        default=1500,
        gt=0,
        description="Longest image side (pixels) sent to the model"
    )

    concurrency: int = Field(
        default=10,
        ge=1,
        description="Maximum images processed at once"
    )

    request_timeout: int = Field(
        default=120,
        gt=0,
        description="HTTP timeout per recognition attempt (seconds)"
    )

    retry_base_delay: float = Field(
        default=0.5,
        ge=0.0,
        description="First backoff delay between attempts (seconds)"
    )

    retry_max_delay: float = Field(
        default=4.0,
        ge=0.0,
        description="Backoff ceiling (seconds)"
    )

    input_cost_per_1k: float = Field(
        default=0.01,
        ge=0.0,
        description="USD per 1K prompt tokens"
    )

    output_cost_per_1k: float = Field(
        default=0.03,
        ge=0.0,
        description="USD per 1K completion tokens"
    )

    log_dir: Optional[Path] = Field(
        default=None,
        description="Directory for JSONL run logs (disabled when unset)"
    )

    @field_validator('openai_api_key')
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v or v.strip() == '':
            raise ValueError(
                "OPENAI_API_KEY is required. "
                "Get your key at: https://platform.openai.com/api-keys"
            )
        return v.strip()

    @field_validator('openai_base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return v.rstrip('/')

    @field_validator('log_dir')
    @classmethod
    def validate_log_dir(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return None
        return Path(v).expanduser().resolve()

    model_config = {
        "frozen": True,
        "validate_assignment": True
    }


def _env_values() -> dict:
    values = {
        'openai_api_key': os.getenv('OPENAI_API_KEY', ''),
        'openai_base_url': os.getenv('OPENAI_BASE_URL'),
        'vision_model': os.getenv('VISION_MODEL'),
        'max_dimension': os.getenv('MAX_IMAGE_DIMENSION'),
        'concurrency': os.getenv('OCR_CONCURRENCY'),
        'request_timeout': os.getenv('OCR_REQUEST_TIMEOUT'),
        'retry_base_delay': os.getenv('OCR_RETRY_BASE_DELAY'),
        'retry_max_delay': os.getenv('OCR_RETRY_MAX_DELAY'),
        'input_cost_per_1k': os.getenv('OCR_INPUT_COST_PER_1K'),
        'output_cost_per_1k': os.getenv('OCR_OUTPUT_COST_PER_1K'),
        'log_dir': os.getenv('PAGESCRIBE_LOG_DIR'),
    }
    # Unset variables fall back to field defaults
    return {k: v for k, v in values.items() if v not in (None, '') or k == 'openai_api_key'}


def load_config(**overrides: Any) -> ScribeConfig:
    """
    Build the configuration from the environment (and .env).

    Keyword overrides (e.g. from command-line flags) win over environment
    values; overrides set to None are ignored.
    """
    values = _env_values()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return ScribeConfig(**values)
