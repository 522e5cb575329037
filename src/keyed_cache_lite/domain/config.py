"""Construction parameters for ConcurrentKeyedCache."""
from __future__ import annotations

from dataclasses import dataclass

from keyed_cache_lite.domain.types import RemovalStrategy


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Validated cache settings.

    num_stripes: lock stripes in the table (positive power of 2).
    scan_ratio: under AUTO, scan the whole cache once the key set is at
        least this fraction of the live entry count.
    strategy: default bulk-removal strategy.
    """
    num_stripes: int = 16
    scan_ratio: float = 0.5
    strategy: RemovalStrategy = RemovalStrategy.AUTO

    def __post_init__(self) -> None:
        if self.num_stripes <= 0 or (self.num_stripes & (self.num_stripes - 1)) != 0:
            raise ValueError("num_stripes must be a positive power of 2")
        if not (0.0 < self.scan_ratio <= 1.0):
            raise ValueError("scan_ratio must be in (0, 1]")
        if not isinstance(self.strategy, RemovalStrategy):
            raise ValueError(f"Unknown removal strategy: {self.strategy!r}")

    def pick_strategy(
        self,
        requested: int,
        live: int,
        override: RemovalStrategy | None = None,
    ) -> RemovalStrategy:
        """Resolve AUTO into a concrete strategy for one bulk removal.

        override, when given, replaces the configured strategy for this
        call only (and may itself be AUTO).
        """
        strategy = self.strategy if override is None else override
        if strategy is not RemovalStrategy.AUTO:
            return strategy
        if live and requested >= self.scan_ratio * live:
            return RemovalStrategy.SCAN_CACHE
        return RemovalStrategy.ITERATE_KEYS
