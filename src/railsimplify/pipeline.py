"""
Main pipeline orchestrator for railsimplify.

Creates new pieces through existing control points in three steps:
1. Discard pieces that are completely invisible.
2. Split pieces with hidden middle sections and trim each to at most one
   hidden segment at its head and one at its tail.
3. Combine adjacent pieces into longer ones, up to the segment cap.
"""

from railsimplify.config import PipelineConfig
from railsimplify.models import Network, count_points
from railsimplify.pieces.engine import merge_pieces
from railsimplify.pieces.split import split_indexed, visible_indexed
from railsimplify.tracer import get_tracer, trace


@trace(label="simplify_network")
def simplify_network(network, log=None, config=None):
    """
    Simplify a rail network's pieces.

    Args:
        network: Network, or any iterable of Piece
        log: optional callable receiving progress messages
        config: PipelineConfig (optional)

    Returns:
        list of merged Piece

    Raises:
        SimplifyError: on any invariant violation, with piece_index giving the
            position of the failing piece in the input; no partial result is
            returned
    """
    tracer = get_tracer()

    if config is None:
        config = PipelineConfig()

    if isinstance(network, Network):
        pieces = list(network.pieces)
    else:
        pieces = list(network)

    num_points = count_points(pieces)
    _report(log, f"Starting with {len(pieces)} pieces, {num_points} control points.")

    # Step 1: discard invisible, remembering input positions for error context
    with tracer.span("filter_visible", module="pipeline"):
        indexed = visible_indexed(pieces)
    visible = [piece for _, piece in indexed]
    if len(visible) != len(pieces):
        kept = {idx for idx, _ in indexed}
        dropped = [idx for idx in range(len(pieces)) if idx not in kept]
        tracer.event(f"Dropped pieces with no visible segments: {dropped}", level="WARN")
        _report(log, f"After removing invisible, {len(visible)} pieces, {count_points(visible)} control points.")

    # Step 2: split and trim
    with tracer.span("split", module="pipeline"):
        runs = split_indexed(indexed)
    simplified = [run for _, run in runs]
    if len(simplified) != len(visible):
        _report(log, f"After splitting, {len(simplified)} pieces, {count_points(simplified)} control points.")

    # Step 3: combine
    with tracer.span("merge", module="pipeline"):
        merged = merge_pieces(simplified, config.merge, sources=[idx for idx, _ in runs])
    if len(merged) != len(simplified):
        merged_points = count_points(merged)
        _report(log, f"After merging, {len(merged)} pieces, {merged_points} control points.")
        _report(
            log,
            f"Piece count reduced by {_reduction(len(merged), len(pieces)):.2f}%.\n"
            f"Control point count reduced by {_reduction(merged_points, num_points):.2f}%.",
        )

    return merged


def _report(log, message):
    get_tracer().event(message)
    if log is not None:
        log(message)


def _reduction(after, before):
    return 100 * (1 - after / before)
