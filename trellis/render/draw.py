"""
Draw Commands

Record of the draw calls made into one component cache since it was
last cleared. Backends keep one DrawBatch per cache so a frame can be
inspected or replayed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple, Union
import numpy as np

from trellis.template.value import Color


# =============================================================================
# Commands
# =============================================================================

@dataclass
class DrawRect:
    """A filled rectangle."""
    x: float
    y: float
    w: float
    h: float
    color: Color


@dataclass
class DrawText:
    """Text centered in an area."""
    text: str
    x: float
    y: float
    w: float
    h: float
    color: Color


@dataclass
class DrawMesh:
    """Filled triangles."""
    vertices: np.ndarray   # (N, 2) float32
    indices: np.ndarray    # (M,) uint16
    color: Color

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3


@dataclass
class DrawCache:
    """Another component's cache composited at a position."""
    source_id: int
    x: float
    y: float


DrawCommand = Union[DrawRect, DrawText, DrawMesh, DrawCache]


# =============================================================================
# Draw Batch
# =============================================================================

@dataclass
class DrawBatch:
    """Commands for one cache, in the order they were issued."""
    commands: List[DrawCommand] = field(default_factory=list)

    def add(self, command: DrawCommand):
        self.commands.append(command)

    def clear(self):
        self.commands.clear()

    @property
    def rects(self) -> List[DrawRect]:
        return [c for c in self.commands if isinstance(c, DrawRect)]

    @property
    def texts(self) -> List[DrawText]:
        return [c for c in self.commands if isinstance(c, DrawText)]

    @property
    def meshes(self) -> List[DrawMesh]:
        return [c for c in self.commands if isinstance(c, DrawMesh)]

    @property
    def caches(self) -> List[DrawCache]:
        return [c for c in self.commands if isinstance(c, DrawCache)]

    def composited_ids(self) -> Tuple[int, ...]:
        return tuple(c.source_id for c in self.caches)

    def __len__(self) -> int:
        return len(self.commands)
