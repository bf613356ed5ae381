"""Cost and policy helper modules for PrintCostLedger."""

__all__ = [
    "cost_calculator",
    "policy_engine",
    "savings_calculator",
    "validation",
]
