from typing import List, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

class DRNG:
    """Deterministic Random Number Generator wrapper."""

    def __init__(self, seed: int):
        self.g = np.random.Generator(np.random.PCG64(seed))

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        """Return k distinct items, in draw order."""
        idx = self.g.choice(len(items), size=k, replace=False)
        return [items[int(i)] for i in idx]
