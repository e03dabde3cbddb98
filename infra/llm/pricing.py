"""
Fixed linear pricing for recognition calls.

cost = prompt_tokens / 1000 * input_cost_per_1k
     + completion_tokens / 1000 * output_cost_per_1k
"""

from typing import Optional

from infra.llm.openai_compat import ParsedResponse

DEFAULT_INPUT_COST_PER_1K = 0.01
DEFAULT_OUTPUT_COST_PER_1K = 0.03


class CostCalculator:
    def __init__(
        self,
        input_cost_per_1k: float = DEFAULT_INPUT_COST_PER_1K,
        output_cost_per_1k: float = DEFAULT_OUTPUT_COST_PER_1K,
    ):
        if input_cost_per_1k < 0 or output_cost_per_1k < 0:
            raise ValueError("token rates must be non-negative")
        self.input_cost_per_1k = input_cost_per_1k
        self.output_cost_per_1k = output_cost_per_1k

    def calculate_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        prompt_cost = (prompt_tokens / 1000.0) * self.input_cost_per_1k
        completion_cost = (completion_tokens / 1000.0) * self.output_cost_per_1k
        return prompt_cost + completion_cost

    def cost_for(self, parsed: Optional[ParsedResponse]) -> float:
        """Cost of one attempt; attempts without usage data cost nothing."""
        if parsed is None:
            return 0.0
        return self.calculate_cost(parsed.prompt_tokens, parsed.completion_tokens)
