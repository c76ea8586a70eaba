"""
Node transforms applied to a resolved markup abbreviation.

Each transform takes ``(node, ancestors, state)`` and edits the node in
place; ``addons.transforms_apply`` walks the tree and runs them in order.
"""

from .addons import TransformState, transforms_apply

__all__ = ["TransformState", "transforms_apply"]
