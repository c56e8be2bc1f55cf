"""
Text Detection Results

Shared data structure for text detector output.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class TextDetection:
    """One recognized text run and its quadrilateral."""
    text: str
    # Four (x, y) vertices: top-left, top-right, bottom-right, bottom-left
    vertices: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def left(self) -> int:
        return self.vertices[0][0]

    @property
    def top(self) -> int:
        return self.vertices[0][1]

    @property
    def right(self) -> int:
        return self.vertices[2][0]

    @property
    def bottom(self) -> int:
        return self.vertices[2][1]

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2

    @classmethod
    def from_vision(cls, annotation: Dict[str, Any]) -> "TextDetection":
        """
        Build a detection from a Google Vision style annotation.

        Vision omits zero coordinates, so missing x/y keys read as 0.

        Args:
            annotation: {"description": str, "boundingPoly": {"vertices": [{x, y}, ...]}}
        """
        raw_vertices = (annotation.get("boundingPoly") or {}).get("vertices") or []
        vertices = [(int(v.get("x", 0)), int(v.get("y", 0))) for v in raw_vertices]
        while len(vertices) < 4:
            vertices.append((0, 0))
        return cls(text=annotation.get("description") or "", vertices=vertices[:4])

    def to_vision(self) -> Dict[str, Any]:
        """Inverse of from_vision(), used when recording fixtures."""
        return {
            "description": self.text,
            "boundingPoly": {"vertices": [{"x": x, "y": y} for x, y in self.vertices]},
        }
