"""
Annotation planning: which sub-regions of a located context to mark.
"""

from qcpack.annotate.planner import (
    MIN_VISIBLE_FRACTION,
    AnnotationPlanner,
    clamp_fractions,
)

__all__ = [
    "AnnotationPlanner",
    "clamp_fractions",
    "MIN_VISIBLE_FRACTION",
]
