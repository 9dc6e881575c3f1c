"""Chart embed configuration as handed to the chart renderer."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Optional

CHART_TYPES = ("line", "interval")


@dataclass
class ChartConfig:
    """Data and encoding of a chart embed.

    ``height`` is the pixel height the renderer draws the chart at.
    """

    data: list = field(default_factory=list)
    type: str = "line"
    x_field: str = "year"
    y_field: str = "value"
    height: int = 300

    def __post_init__(self):
        if self.type not in CHART_TYPES:
            raise ValueError(f"Unsupported chart type: {self.type!r}")

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ChartConfig":
        if not data:
            return cls()

        kwargs = dict(data)
        # Accept the renderer's camelCase field names as well.
        if "xField" in kwargs:
            kwargs["x_field"] = kwargs.pop("xField")
        if "yField" in kwargs:
            kwargs["y_field"] = kwargs.pop("yField")
        known = {"data", "type", "x_field", "y_field", "height"}
        return cls(**{k: v for k, v in kwargs.items() if k in known})


__all__ = ["ChartConfig", "CHART_TYPES"]
