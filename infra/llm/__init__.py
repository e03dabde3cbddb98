"""
LLM subsystem for OpenAI-compatible vision transcription.

Provides:
- RecognitionClient: Single-image transcription with retry, backoff and cost tracking
- RecognitionResult: Outcome of one logical recognition call
- CostCalculator: Fixed linear per-token pricing
- is_refusal: Default refusal predicate
"""

from infra.llm.client import RecognitionClient
from infra.llm.models import RecognitionResult
from infra.llm.pricing import CostCalculator
from infra.llm.refusal import is_refusal, RefusalPredicate

__all__ = [
    "RecognitionClient",
    "RecognitionResult",
    "CostCalculator",
    "is_refusal",
    "RefusalPredicate",
]
