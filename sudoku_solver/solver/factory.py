"""
Strategy Factory Module - Registry of search strategies by name.

Strategy names double as the command-line --strategy choices and the
"strategy_name" value in config.json, so they are kept short.
"""

from typing import Any, Dict, List, Type

from .base import SearchStrategy


# name -> strategy class, kept in registration order (depth, breadth, best)
_STRATEGIES: Dict[str, Type[SearchStrategy]] = {}

DEFAULT_STRATEGY = "depth"


def register_strategy(cls: Type[SearchStrategy]) -> Type[SearchStrategy]:
    """
    Class decorator filing a strategy under cls.name.

    Usage:
        @register_strategy
        class LowestFirstStrategy(SearchStrategy):
            name = "lowest"
            def push(self, frontier, handle, arena): ...
    """
    if cls.name in _STRATEGIES and _STRATEGIES[cls.name] is not cls:
        raise ValueError(f"Strategy name already registered: {cls.name}")
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str, **kwargs: Any) -> SearchStrategy:
    """
    Instantiate the strategy registered under name.

    Args:
        name: "depth", "breadth" or "best"
        **kwargs: Constructor arguments for the strategy

    Raises:
        ValueError: If name is not registered; the message lists the
            registered names
    """
    try:
        strategy_cls = _STRATEGIES[name]
    except KeyError:
        names = ", ".join(_STRATEGIES)
        raise ValueError(f"Unknown strategy: {name}. Available: {names}") from None
    return strategy_cls(**kwargs)


def get_strategy_names() -> List[str]:
    return list(_STRATEGIES)


def get_strategy_info() -> List[Dict[str, str]]:
    """Name and description of each strategy, for listings and prompts."""
    return [{"name": name, "description": cls.description} for name, cls in _STRATEGIES.items()]


def get_default_strategy_name() -> str:
    """Depth-first, matching the saved-settings default."""
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES), "")
