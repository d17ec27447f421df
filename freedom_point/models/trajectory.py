"""Age-indexed value series and the points derived from them."""

from typing import Iterator, List, Tuple

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A point on the age/value plane."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Age")
    y: float = Field(..., description="Capital value")

    @property
    def age(self) -> float:
        return self.x

    @property
    def value(self) -> float:
        return self.y

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def rounded(self, places: int = 3) -> "Point":
        """Copy rounded for display."""
        return Point(x=round(self.x, places), y=round(self.y, places))


class Trajectory(BaseModel):
    """Values indexed from ``begin``: ``values[k]`` is the value at age ``begin + k``."""

    model_config = ConfigDict(frozen=True)

    begin: int
    values: List[float] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def __iter__(self) -> Iterator[float]:  # type: ignore[override]
        return iter(self.values)

    def ages(self) -> List[int]:
        return list(range(self.begin, self.begin + len(self.values)))

    def points(self) -> List[Point]:
        """Polyline vertices ``(begin + k, values[k])``."""
        return [Point(x=age, y=value) for age, value in zip(self.ages(), self.values)]

    def as_array(self) -> NDArray[np.float64]:
        return np.asarray(self.values, dtype=np.float64)
