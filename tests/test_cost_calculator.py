"""Tests for cost calculator."""

import pytest

from skillx.logging.cost_calculator import MODEL_PRICING, calculate_cost


class TestCalculateCost:
    def test_haiku_call(self):
        cost = calculate_cost([("claude-haiku-4-5-20251001", 1_000_000, 1_000_000)])
        assert cost == pytest.approx(6.00)

    def test_mixed_calls(self):
        cost = calculate_cost([
            ("claude-haiku-4-5-20251001", 10_000, 2_000),
            ("claude-sonnet-4-5-20250929", 5_000, 20_000),
        ])
        expected = 0.01 + 0.01 + 0.015 + 0.3
        assert cost == pytest.approx(expected)

    def test_unknown_model_is_free(self):
        assert calculate_cost([("gemini-3-flash-preview", 1000, 1000)]) == 0.0

    def test_empty(self):
        assert calculate_cost([]) == 0.0

    def test_configured_models_are_priced(self):
        assert set(MODEL_PRICING) == {"claude-haiku-4-5-20251001", "claude-sonnet-4-5-20250929"}
