"""
Visibility filtering and run splitting.

A piece may alternate between visible and hidden sections. Splitting cuts
it at every hidden interior segment, keeping at most one hidden segment at
the head and one at the tail of each run so later merge tests still see the
junction geometry.
"""

from railsimplify.errors import NotVisibleError, SimplifyError
from railsimplify.models import Piece
from railsimplify.pieces.checks import enforce_structure, enforce_visible
from railsimplify.tracer import get_tracer, trace


def filter_visible(pieces):
    """Return the pieces that have at least one visible segment."""
    return [piece for _, piece in visible_indexed(pieces)]


def visible_indexed(pieces):
    """Pair each piece with at least one visible segment with its input index."""
    return [(idx, piece) for idx, piece in enumerate(pieces) if any(piece.visible)]


@trace(label="split_pieces")
def split_pieces(pieces):
    """
    Split every piece into simplified runs.

    Runs are returned in input order, runs of one piece in the order they
    appear along it.

    Raises:
        SimplifyError annotated with stage "split" and the failing piece index.
    """
    return [run for _, run in split_indexed(enumerate(pieces))]


def split_indexed(indexed_pieces):
    """
    Split (index, piece) pairs, keeping each run paired with its source index.

    Errors are annotated with the index paired with the failing piece, so a
    caller that filtered its input first still gets positions in the
    original input.
    """
    tracer = get_tracer()

    result = []
    for idx, piece in indexed_pieces:
        try:
            runs = split_piece(piece)
        except SimplifyError as e:
            raise e.annotate(stage="split", piece_index=idx)

        if len(runs) > 1:
            tracer.event(
                f"Split piece {idx} from {piece.segment_count} segments to {[r.segment_count for r in runs]}",
                level="DEBUG",
            )
        result.extend((idx, run) for run in runs)

    return result


def split_piece(piece):
    """
    Split a piece with hidden middle sections into separate pieces.

    Each returned piece has visible interior segments only, plus at most one
    hidden segment at either end. Points inside a gap of two or more hidden
    segments are dropped.

    Args:
        piece: Piece with any visibility pattern

    Returns:
        list of Piece

    Raises:
        NotVisibleError: if no segment of the piece is visible
        InvariantViolationError: if points and flags do not line up
    """
    enforce_structure(piece)

    visible = piece.visible
    points = piece.points

    first_visible = next((i for i, v in enumerate(visible) if v), -1)
    if first_visible == -1:
        raise NotVisibleError("No segments are visible")

    if first_visible == 0:
        # No hidden section at the head
        run_points = [points[0], points[1]]
        run_visible = [True]
    else:
        # Keep one hidden segment before the first visible one
        run_points = list(points[first_visible - 1:first_visible + 2])
        run_visible = [False, True]

    runs = []
    for i in range(first_visible + 1, len(visible)):
        this_visible = visible[i]
        prev_visible = visible[i - 1]

        if prev_visible:
            # Extend the run; a hidden segment becomes its tail buffer
            run_points.append(points[i + 1])
            run_visible.append(this_visible)
            if not this_visible:
                runs.append(_close_run(run_points, run_visible, piece.kind))
        elif this_visible:
            # Start a new run with the preceding hidden segment as head buffer
            run_points = list(points[i - 1:i + 2])
            run_visible = [False, True]

    if visible[-1]:
        # Trailing run is still open
        runs.append(_close_run(run_points, run_visible, piece.kind))

    return runs


def _close_run(run_points, run_visible, kind):
    run = Piece(points=list(run_points), visible=list(run_visible), kind=kind)
    enforce_visible(run)
    return run
