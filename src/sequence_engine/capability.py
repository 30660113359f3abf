"""Which transforms admit a bounded-memory causal (online) realization."""

from __future__ import annotations

from typing import Dict, FrozenSet, List

from .errors import ArgumentError
from .operators import Operator

CAUSAL_OPERATORS: FrozenSet[Operator] = frozenset(
    {
        Operator.PAD_FRONT,
        Operator.DELAY,
        Operator.UPSAMPLE,
        Operator.DOWNSAMPLE,
        Operator.DIFF,
        Operator.CUMSUM,
    }
)

# pad-back, advance and reverse need the total length (or future samples)
# before some outputs can be emitted.
NON_CAUSAL_OPERATORS: FrozenSet[Operator] = frozenset(Operator) - CAUSAL_OPERATORS


def online_capable(op: Operator, assume_unbounded_input: bool = True) -> bool:
    """Return whether ``op`` can run over the caller's input with finite memory.

    With a potentially unbounded input only causal, bounded-state operators
    qualify. A known-finite input can always be buffered, so every transform
    qualifies.
    """

    if not isinstance(op, Operator):
        raise ArgumentError(f"expected an Operator (got {op!r})")
    if assume_unbounded_input:
        return op in CAUSAL_OPERATORS
    return True


def capability_report() -> List[Dict[str, object]]:
    return [
        {
            "operator": op.value,
            "unbounded": online_capable(op, assume_unbounded_input=True),
            "finite": online_capable(op, assume_unbounded_input=False),
        }
        for op in Operator
    ]
