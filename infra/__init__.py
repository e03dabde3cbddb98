from infra.config import ScribeConfig, load_config
from infra.storage import ImageRepository

from infra.images import (
    Resizer,
    resize_image,
)

from infra.llm import (
    RecognitionClient,
    RecognitionResult,
    CostCalculator,
    is_refusal,
)

from infra.logger import (
    PipelineLogger,
    create_logger,
)

from infra.progress import RichProgressSink

__all__ = [
    "ScribeConfig",
    "load_config",

    "ImageRepository",

    "Resizer",
    "resize_image",

    "RecognitionClient",
    "RecognitionResult",
    "CostCalculator",
    "is_refusal",

    "PipelineLogger",
    "create_logger",

    "RichProgressSink",
]
