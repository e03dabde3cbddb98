from .schemas import ImageTask, PageResult, RunConfig, RunSummary
from .dates import extract_date
from .formatter import format_transcript
from .orchestrator import TranscriptionPipeline, ProgressCallback

__all__ = [
    "ImageTask",
    "PageResult",
    "RunConfig",
    "RunSummary",
    "extract_date",
    "format_transcript",
    "TranscriptionPipeline",
    "ProgressCallback",
]
