# custom_types.py
"""
Type aliases shared across probdist.

We generally follow the conventions:
- Annotate function input with `ArrayLike`
- Annotate function output with `Array`
- Annotate random sources with `UniformSource`; `PRNG` is the concrete
  numpy generator that satisfies it.
"""
from __future__ import annotations
from typing import Protocol, TypeAlias, overload, runtime_checkable
from numpy.random import Generator as NumpyRNG

from numpy.typing import (
    NDArray as NumpyArray,
    ArrayLike as NumpyArrayLike
)

from numpy import (
    floating as NumpyFloating,
    integer as NumpyInteger,
)

Array = NumpyArray
ArrayLike: TypeAlias = NumpyArrayLike
Float: TypeAlias = NumpyFloating
Integer: TypeAlias = NumpyInteger
PRNG: TypeAlias = NumpyRNG


@runtime_checkable
class UniformSource(Protocol):
    """Anything that hands out uniform doubles in [0, 1).

    ``random()`` returns one double, ``random(size)`` an array of ``size``
    doubles drawn in stream order.
    """

    @overload
    def random(self) -> float: ...

    @overload
    def random(self, size: int) -> Array: ...

    def random(self, size=None): ...
