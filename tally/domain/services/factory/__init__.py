from .money_factory import MoneyFactory

__all__ = [
    "MoneyFactory",
]
