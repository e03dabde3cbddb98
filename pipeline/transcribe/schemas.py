"""
Transcription run schemas.

ImageTask and PageResult are plain frozen dataclasses (PageResult carries
an exception object). RunConfig and RunSummary are validated pydantic
models.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


@dataclass(frozen=True)
class ImageTask:
    """One unit of work: an image name and its position in the sorted listing."""
    name: str
    ordinal: int


@dataclass(frozen=True)
class PageResult:
    """
    Outcome for one image. Exactly one exists per ImageTask.

    A failed image has empty text, a populated error and the inline
    message that goes into the transcript in place of the text.
    attempts is 0 when the image never reached recognition.
    """
    name: str
    ordinal: int
    date: str = ""
    text: str = ""
    cost_usd: float = 0.0
    attempts: int = 0
    duration_seconds: float = 0.0
    error: Optional[BaseException] = None
    error_message: str = ""

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def display_text(self) -> str:
        if self.error is not None:
            return self.error_message or str(self.error)
        return self.text


class RunConfig(BaseModel):
    """Parameters for one transcription run."""
    concurrency: int = Field(default=10, ge=1, description="Maximum images in flight")
    start_date: str = Field(default="", description="Date carried into pages before the first dated page")
    max_dimension: int = Field(default=1500, gt=0, description="Longest image side sent to the model")

    @field_validator('start_date', mode='before')
    @classmethod
    def normalize_start_date(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    model_config = {"frozen": True}


class RunSummary(BaseModel):
    """Aggregate metrics for a completed run."""
    images_processed: int = Field(..., ge=0)
    total_cost_usd: float = Field(..., ge=0.0)
    cost_per_image: float = Field(..., ge=0.0)
    total_attempts: int = Field(..., ge=0)
    attempts_per_image: float = Field(..., ge=0.0)
    total_time_seconds: float = Field(..., ge=0.0)
    time_per_image: float = Field(..., ge=0.0)
    failed_images: List[str] = Field(default_factory=list)
    output_path: Optional[str] = None

    @classmethod
    def from_results(
        cls,
        results: List[PageResult],
        total_time_seconds: float,
        output_path: Optional[str] = None
    ) -> "RunSummary":
        count = len(results)
        total_cost = sum(r.cost_usd for r in results)
        total_attempts = sum(r.attempts for r in results)

        return cls(
            images_processed=count,
            total_cost_usd=total_cost,
            cost_per_image=total_cost / count if count else 0.0,
            total_attempts=total_attempts,
            attempts_per_image=total_attempts / count if count else 0.0,
            total_time_seconds=total_time_seconds,
            time_per_image=total_time_seconds / count if count else 0.0,
            failed_images=[r.name for r in results if not r.success],
            output_path=output_path,
        )
