from __future__ import annotations

from typing import Callable, Tuple

CoordinateTransform = Callable[[float, float], Tuple[float, float]]


def identity_transform(x: float, y: float) -> Tuple[float, float]:
    return x, y
