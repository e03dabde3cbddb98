from typing import Dict, Any, Optional
from dataclasses import dataclass

from infra.errors import MalformedResponseError
from infra.logger import PipelineLogger, create_logger


@dataclass
class ParsedResponse:
    content: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    model_used: str
    finish_reason: Optional[str] = None


class ResponseParser:
    def __init__(self, logger: Optional[PipelineLogger] = None):
        self.logger = logger or create_logger("pagescribe", "parser")

    def parse_chat_completion(self, result: Dict[str, Any], model: str) -> ParsedResponse:
        try:
            choice = result['choices'][0]
            content = choice['message']['content'] or ""
            usage = result.get('usage') or {}

            # Providers may send null counts; treat them as no usage data
            prompt_tokens = usage.get('prompt_tokens') or 0
            completion_tokens = usage.get('completion_tokens') or 0
            total_tokens = usage.get('total_tokens') or (prompt_tokens + completion_tokens)

            self.logger.debug(
                f"Parsed chat completion: model={model}, "
                f"content_length={len(content)}, "
                f"prompt_tokens={prompt_tokens}, completion_tokens={completion_tokens}"
            )

            return ParsedResponse(
                content=content,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=total_tokens,
                model_used=result.get('model', model),
                finish_reason=choice.get('finish_reason'),
            )

        except (KeyError, IndexError, TypeError) as e:
            response_keys = list(result.keys()) if isinstance(result, dict) else type(result).__name__
            self.logger.error(
                f"Malformed API response (missing expected keys): "
                f"model={model}, error_type={type(e).__name__}, error={str(e)}, "
                f"response_keys={response_keys}"
            )

            raise MalformedResponseError(
                f"Malformed API response: missing '{e.args[0] if e.args else 'expected key'}'"
            ) from e
