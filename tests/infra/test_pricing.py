import pytest

from infra.llm.openai_compat import ParsedResponse
from infra.llm.pricing import CostCalculator


class TestCostCalculator:

    def test_default_rates(self):
        calculator = CostCalculator()

        assert calculator.calculate_cost(1000, 0) == pytest.approx(0.01)
        assert calculator.calculate_cost(0, 1000) == pytest.approx(0.03)
        assert calculator.calculate_cost(1500, 700) == pytest.approx(0.015 + 0.021)

    def test_custom_rates(self):
        calculator = CostCalculator(input_cost_per_1k=0.0025, output_cost_per_1k=0.01)

        assert calculator.calculate_cost(2000, 1000) == pytest.approx(0.005 + 0.01)

    def test_attempt_without_usage_costs_nothing(self):
        assert CostCalculator().cost_for(None) == 0.0

    def test_cost_for_parsed_response(self):
        parsed = ParsedResponse(
            content="text",
            prompt_tokens=1000,
            completion_tokens=1000,
            total_tokens=2000,
            model_used="gpt-4o",
        )

        assert CostCalculator().cost_for(parsed) == pytest.approx(0.04)

    def test_negative_rates_rejected(self):
        with pytest.raises(ValueError):
            CostCalculator(input_cost_per_1k=-0.01)
