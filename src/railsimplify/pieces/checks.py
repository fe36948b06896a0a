"""
Contract checks for pieces.

Each check raises a typed SimplifyError instead of returning a flag, so a
broken piece can never be mistaken for an ordinary "no merge" outcome.
"""

from railsimplify.errors import InvariantViolationError, NotVisibleError


def enforce_structure(piece):
    """Require one more control point than visibility flags."""
    if len(piece.points) - len(piece.visible) != 1:
        raise InvariantViolationError(
            f"Segment count does not match control point count, "
            f"{len(piece.points)} points, {len(piece.visible)} segments"
        )


def enforce_visible(piece):
    """Require at least one visible segment."""
    if not any(piece.visible):
        raise NotVisibleError("Piece has no visible segments")


def enforce_simplified(piece):
    """Require a visible piece whose hidden segments are only at its ends."""
    enforce_visible(piece)
    if not all(piece.visible[1:-1]):
        raise InvariantViolationError("Piece has hidden middle sections")
