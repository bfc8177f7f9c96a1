"""
Token and cost accounting for generation calls

One CostTracker is shared by the HTTP service (see /health); tests and the
PipelineController's LocalBackend may carry their own.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional

from scriptwriter.core import get_logger

from .base import UsageStats

logger = get_logger(__name__, component="cost_tracker")

# USD per 1M tokens, https://ai.google.dev/pricing
PRICING = {
    "gemini-2.5-pro": {"input": 1.25, "output": 10.0},
    "gemini-2.5-flash": {"input": 0.30, "output": 2.50},
    "gemini-2.0-flash": {"input": 0.10, "output": 0.40},
    "gemini-flash-lite-latest": {"input": 0.075, "output": 0.30},
}

DEFAULT_PRICING = {"input": 0.075, "output": 0.30}


def calculate_cost(model_name: str, input_tokens: int, output_tokens: int) -> Dict[str, Any]:
    """Price one call; costs are rounded to 6 places."""
    rates = PRICING.get(model_name, DEFAULT_PRICING)
    costs = {
        "input_cost": input_tokens * rates["input"] / 1_000_000,
        "output_cost": output_tokens * rates["output"] / 1_000_000,
    }
    costs["total_cost"] = costs["input_cost"] + costs["output_cost"]
    return {
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        **{name: round(value, 6) for name, value in costs.items()},
    }


@dataclass
class _Tally:
    requests: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cost: float = 0.0

    def add(self, input_tokens: int, output_tokens: int, cost: float) -> None:
        self.requests += 1
        self.input_tokens += input_tokens
        self.output_tokens += output_tokens
        self.cost += cost

    def as_dict(self) -> Dict[str, Any]:
        return {
            "requests": self.requests,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.input_tokens + self.output_tokens,
            "cost_usd": round(self.cost, 4),
        }


class CostTracker:
    """Running totals overall, per model and per pipeline step"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self._total = _Tally()
        self._by_model: Dict[str, _Tally] = {}
        self._by_step: Dict[str, _Tally] = {}

    def track_usage(self, usage: Optional[UsageStats], model_name: str, step: Optional[str] = None) -> None:
        """Record one billed response; missing usage counts as a request with zero tokens."""
        tokens = (usage.input_tokens, usage.output_tokens) if usage else (0, 0)
        cost = calculate_cost(model_name, *tokens)["total_cost"]

        self._total.add(*tokens, cost)
        self._by_model.setdefault(model_name, _Tally()).add(*tokens, cost)
        if step:
            self._by_step.setdefault(step, _Tally()).add(*tokens, cost)

        if model_name not in PRICING:
            logger.debug(f"No pricing for {model_name}, using default rates")

    def get_summary(self) -> Dict[str, Any]:
        total = self._total.as_dict()
        return {
            "total_requests": total["requests"],
            "total_input_tokens": total["input_tokens"],
            "total_output_tokens": total["output_tokens"],
            "total_tokens": total["total_tokens"],
            "total_cost_usd": total["cost_usd"],
            "by_model": {model: tally.as_dict() for model, tally in self._by_model.items()},
            "by_step": {step: tally.as_dict() for step, tally in self._by_step.items()},
        }


_global_tracker = CostTracker()


def get_cost_tracker() -> CostTracker:
    return _global_tracker
