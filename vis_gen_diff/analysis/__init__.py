"""Numeric comparison package.

Design principle:
  - Ingest produces validated :class:`~vis_gen_diff.models.frames.VisibilityFile` objects.
  - Analysis consumes their sample arrays and reduces each pair to one number.
"""

from .compare import abs_difference, max_abs_difference

__all__ = [
    "abs_difference",
    "max_abs_difference",
]
