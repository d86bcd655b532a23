"""
Partition the ticker universe into model-sized batches.
"""

from typing import List, Sequence

from futuna.domain.models import Batch


def make_batches(symbols: Sequence[str], size: int) -> List[Batch]:
    """
    Split symbols into consecutive chunks of at most ``size``.

    Input order is preserved and only the final chunk may be shorter.
    Empty input yields no batches.
    """
    if size <= 0:
        raise ValueError("batch size must be positive")

    batches = []
    for start in range(0, len(symbols), size):
        chunk = tuple(symbols[start : start + size])
        batches.append(Batch(index=len(batches) + 1, symbols=chunk))
    return batches
