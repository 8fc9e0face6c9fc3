"""
Pipes - per-argument transforms applied before the handler runs.

Pipes chain: the output of one feeds the next, in declared order.
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..faults import BadRequest


@dataclass(frozen=True)
class ArgumentMetadata:
    """
    Describes the argument a pipe is transforming.

    Attributes:
        type: "body", "query", "param" or "custom"
        data: Sub-key the argument was narrowed to, if any
    """

    type: str
    data: Optional[str] = None


class Pipe(ABC):
    """Base class for pipes; ``transform`` may be sync or async."""

    @abstractmethod
    def transform(self, value: Any, metadata: ArgumentMetadata) -> Any:
        ...


class PipesConsumer:
    async def apply_pipes(self, value: Any, metadata: ArgumentMetadata, pipes: Sequence[Pipe]) -> Any:
        for pipe in pipes:
            value = pipe.transform(value, metadata)
            if inspect.isawaitable(value):
                value = await value
        return value


# ============================================================================
# Built-in pipes
# ============================================================================

class ParseIntPipe(Pipe):
    """Converts the value to ``int``; raises BadRequest when it cannot."""

    def transform(self, value: Any, metadata: ArgumentMetadata) -> int:
        if isinstance(value, bool):
            raise BadRequest(f"Parameter {metadata.data or metadata.type} must be an integer")
        try:
            return int(str(value).strip(), 10)
        except (TypeError, ValueError):
            raise BadRequest(f"Parameter {metadata.data or metadata.type} must be an integer") from None


class DefaultValuePipe(Pipe):
    """Substitutes ``default`` when the value is missing."""

    def __init__(self, default: Any):
        self.default = default

    def transform(self, value: Any, metadata: ArgumentMetadata) -> Any:
        if value is None:
            return self.default
        return value
