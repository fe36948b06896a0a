"""
Pairwise merging of simplified pieces.

Two pieces of the same kind are joined when the tail of one lines up with
the head of the other: the anchors must be close and the headings at the
anchors must agree. The junction point becomes the midpoint of the two
anchors.
"""

from railsimplify.config import LIMIT_TOLERANCE, MergeConfig
from railsimplify.errors import IllegalIndexError
from railsimplify.geometry.angles import bearing, circular_mean
from railsimplify.geometry.vectors import distance_squared, midpoint, vector_heading
from railsimplify.models import Piece
from railsimplify.pieces.checks import enforce_simplified, enforce_structure


def head_anchor(piece):
    """Index of the control point at the start of the first visible segment."""
    return next(i for i, v in enumerate(piece.visible) if v)


def tail_anchor(piece):
    """Index of the control point at the end of the last visible segment."""
    last = len(piece.visible) - 1
    while not piece.visible[last]:
        last -= 1
    return last + 1


def piece_heading(piece, index, legacy=False):
    """
    Heading in degrees at a control point of a piece.

    Endpoints use their single adjacent segment; interior points use the
    circular mean of both adjacent segments. Segment headings point from
    the later control point back toward the earlier one.

    Raises:
        IllegalIndexError: if index is outside 0..segment_count
    """
    points = piece.points
    last = len(piece.visible)

    if index == 0:
        return vector_heading(points[1], points[0], legacy)
    if index == last:
        return vector_heading(points[index], points[index - 1], legacy)
    if 0 < index < last:
        ahead = vector_heading(points[index + 1], points[index], legacy)
        behind = vector_heading(points[index], points[index - 1], legacy)
        return circular_mean(ahead, behind)

    raise IllegalIndexError(f"Illegal control point index {index}")


def is_joinable(dist_squared, angle, config):
    """
    Check the anchor distance and bearing against the configured limits.

    Both limits are inclusive, up to LIMIT_TOLERANCE of rounding in the
    computed values.
    """
    if dist_squared > config.distance_limit_squared + LIMIT_TOLERANCE:
        return False
    return angle <= config.bearing_limit + LIMIT_TOLERANCE


def merge_sub_pieces(head, tail_index, tail, head_index):
    """
    Join head[:tail_index] to tail[head_index:].

    head contributes its points before its tail anchor, tail contributes its
    points from its head anchor on. The shared junction is replaced by the
    midpoint of both anchors, and the hidden buffer segments at the join
    are dropped.

    Raises:
        InvariantViolationError: if the result is not a well-formed simplified piece
    """
    tail_points = tail.points[head_index:]
    points = list(head.points[:tail_index]) + list(tail_points)
    points[tail_index] = midpoint(tail_points[0], head.points[tail_index])

    visible = list(head.visible[:tail_index]) + list(tail.visible[head_index:])

    merged = Piece(points=points, visible=visible, kind=head.kind)
    enforce_structure(merged)
    enforce_simplified(merged)
    return merged


def merge_pair(first, second, config=None):
    """
    Merge two simplified pieces if they are adjacent.

    Orientations are tried in a fixed order: (first, second),
    (first, reversed second), (reversed first, second), (reversed first,
    reversed second). The first orientation passing the distance and
    bearing tests is used; if its result exceeds max_segments the pair is
    not merged at all.

    Returns:
        merged Piece, or None if the pieces cannot be merged

    Raises:
        NotVisibleError, InvariantViolationError: if either input is not simplified
    """
    if config is None:
        config = MergeConfig()

    if first.kind != second.kind:
        return None

    enforce_simplified(first)
    enforce_simplified(second)

    for a in (first, first.reversed()):
        tail_index = tail_anchor(a)
        tail_point = a.points[tail_index]
        heading_a = piece_heading(a, tail_index, config.legacy_heading)

        for b in (second, second.reversed()):
            head_index = head_anchor(b)
            head_point = b.points[head_index]
            heading_b = piece_heading(b, head_index, config.legacy_heading)

            d2 = distance_squared(tail_point, head_point)
            if not is_joinable(d2, bearing(heading_a, heading_b), config):
                continue

            result = merge_sub_pieces(a, tail_index, b, head_index)
            if result.segment_count > config.max_segments:
                return None
            return result

    return None
