"""
Token cost estimation for generation calls.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Any, Mapping

_PER_THOUSAND = Decimal(1000)
_COST_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class ModelPrice:
    """USD per 1,000 tokens."""

    input: Decimal
    output: Decimal


@dataclass(frozen=True)
class CostEstimate:
    """Itemized cost breakdown for one generation call."""

    model: str
    total_tokens: int
    input_tokens: int
    output_tokens: int
    input_cost: Decimal
    output_cost: Decimal
    total_cost: Decimal
    currency: str = "USD"

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "total_tokens": self.total_tokens,
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "input_cost": float(self.input_cost),
            "output_cost": float(self.output_cost),
            "total_cost": float(self.total_cost),
            "currency": self.currency,
        }


def _round_cost(value: Decimal) -> Decimal:
    return value.quantize(_COST_PLACES, rounding=ROUND_HALF_UP)


class CostEstimator:
    """
    Maps (token count, model) to a cost breakdown.

    The token total is split into input and output portions with a fixed
    ratio rather than the provider's real breakdown. Unknown models are
    priced with the default model's row, so estimate() never fails.
    """

    def __init__(
        self,
        pricing: Mapping[str, Mapping[str, float]],
        default_model: str,
        input_ratio: float = 0.3,
    ):
        if default_model not in pricing:
            raise ValueError(f"Default pricing model {default_model!r} missing from price table")

        self._pricing: Mapping[str, ModelPrice] = MappingProxyType({
            model: ModelPrice(
                input=Decimal(str(rates["input"])),
                output=Decimal(str(rates["output"])),
            )
            for model, rates in pricing.items()
        })
        self._default_model = default_model
        self._input_ratio = Decimal(str(input_ratio))

    @property
    def pricing(self) -> Mapping[str, ModelPrice]:
        return self._pricing

    def price_for(self, model: str) -> ModelPrice:
        return self._pricing.get(model, self._pricing[self._default_model])

    def estimate(self, tokens: int, model: str) -> CostEstimate:
        """
        Estimate the cost of a generation call.

        Args:
            tokens: Total tokens reported for the call
            model: Model identifier reported by the provider

        Returns:
            CostEstimate with every cost rounded to 4 decimal places
        """
        price = self.price_for(model)

        input_tokens = int(Decimal(tokens) * self._input_ratio)
        output_tokens = int(Decimal(tokens) * (1 - self._input_ratio))

        input_cost = Decimal(input_tokens) / _PER_THOUSAND * price.input
        output_cost = Decimal(output_tokens) / _PER_THOUSAND * price.output

        return CostEstimate(
            model=model,
            total_tokens=tokens,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            input_cost=_round_cost(input_cost),
            output_cost=_round_cost(output_cost),
            total_cost=_round_cost(input_cost + output_cost),
        )
