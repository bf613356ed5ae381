"""
Policy and pricing configuration.

PolicyConfiguration is a frozen snapshot shared read-only by the policy
engine, the cost calculator and the savings calculator. It is built once at
startup from the Flask config and replaced wholesale on hot reload; a
request always sees a single consistent snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from decimal import Decimal
from typing import Dict, Any, Mapping

from core.exceptions import ConfigurationError


@dataclass(frozen=True)
class PolicyConfiguration:
    """
    Policy switches and pricing constants.

    Amounts are in minor currency units per page.
    """

    auto_convert_color_to_bw: bool = True
    """Reclassify mostly-monochrome jobs as black/white."""

    force_duplex: bool = True
    """Switch eligible single-sided jobs to double-sided."""

    color_page_ratio_threshold: Decimal = Decimal("0.1")
    """Max color/total ratio (inclusive) for color-to-bw conversion."""

    price_per_page_bw: Decimal = Decimal("30")
    """Cost of one black/white page."""

    price_per_page_color: Decimal = Decimal("150")
    """Cost of one color page."""

    duplex_discount_per_page: Decimal = Decimal("20")
    """Discount per page (of the whole job) when printing duplex."""

    color_conversion_saving_per_page: Decimal = Decimal("120")
    """Reported saving per converted page."""

    duplex_saving_per_page: Decimal = Decimal("30")
    """Reported saving per sheet saved by duplex."""

    def __post_init__(self):
        threshold = self.color_page_ratio_threshold
        if threshold < 0 or threshold > 1:
            raise ConfigurationError(
                "color_page_ratio_threshold", threshold, "must be within [0, 1]"
            )
        for name in _AMOUNT_FIELDS:
            if getattr(self, name) < 0:
                raise ConfigurationError(name, getattr(self, name), "must not be negative")

    def with_overrides(self, overrides: Mapping[str, Any]) -> "PolicyConfiguration":
        """
        Return a new configuration with some options replaced.

        Args:
            overrides: snake_case option names mapped to new values

        Raises:
            ConfigurationError: If an option is unknown or out of range
        """
        changes = {}
        for key, value in overrides.items():
            if key in _BOOL_FIELDS:
                changes[key] = _parse_bool(key, value)
            elif key in _DECIMAL_FIELDS:
                changes[key] = _parse_decimal(key, value)
            else:
                raise ConfigurationError(key, value, "unknown option")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dictionary."""
        return {
            key: (str(value) if isinstance(value, Decimal) else value)
            for key, value in asdict(self).items()
        }

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "PolicyConfiguration":
        """
        Build from a Flask-style config mapping (upper-case keys).

        Missing keys keep their defaults.

        Raises:
            ConfigurationError: If a value cannot be parsed or is out of range
        """
        overrides = {
            field_name: config[key]
            for key, field_name in CONFIG_KEYS.items()
            if config.get(key) is not None
        }
        return cls().with_overrides(overrides)


# Flask config key -> field name
CONFIG_KEYS = {
    "POLICY_AUTO_CONVERT_COLOR_TO_BW": "auto_convert_color_to_bw",
    "POLICY_FORCE_DUPLEX": "force_duplex",
    "POLICY_COLOR_PAGE_RATIO_THRESHOLD": "color_page_ratio_threshold",
    "COST_PER_PAGE_BW": "price_per_page_bw",
    "COST_PER_PAGE_COLOR": "price_per_page_color",
    "COST_DUPLEX_DISCOUNT_PER_PAGE": "duplex_discount_per_page",
    "SAVING_COLOR_CONVERSION_PER_PAGE": "color_conversion_saving_per_page",
    "SAVING_DUPLEX_PER_PAGE": "duplex_saving_per_page",
}

_BOOL_FIELDS = ("auto_convert_color_to_bw", "force_duplex")

_AMOUNT_FIELDS = (
    "price_per_page_bw",
    "price_per_page_color",
    "duplex_discount_per_page",
    "color_conversion_saving_per_page",
    "duplex_saving_per_page",
)

_DECIMAL_FIELDS = ("color_page_ratio_threshold",) + _AMOUNT_FIELDS


def _parse_bool(option: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    raise ConfigurationError(option, value, "expected a boolean")


def _parse_decimal(option: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(option, value, "expected a number")
    try:
        parsed = Decimal(str(value))
    except ArithmeticError:
        raise ConfigurationError(option, value, "expected a number")
    if not parsed.is_finite():
        raise ConfigurationError(option, value, "expected a finite number")
    return parsed
