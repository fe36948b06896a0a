"""
Fixpoint merge engine.

Repeats pairwise merge passes over the working set until a full pass
merges nothing.
"""

from railsimplify.config import MergeConfig
from railsimplify.errors import SimplifyError
from railsimplify.pieces.checks import enforce_simplified, enforce_structure
from railsimplify.pieces.merge import merge_pair
from railsimplify.tracer import get_tracer, trace


class WorkingSet:
    """
    Pieces keyed by stable ids, kept in output order.

    A merge retires two ids and files the merged piece under a fresh id in
    the slot of the first one, so ids held by an in-progress scan never
    point at a different piece. Each id also remembers the caller's index
    of the piece it started from; a merged piece keeps the first one's.
    """

    def __init__(self, pieces=(), sources=None):
        self._pieces = {}
        self._sources = {}
        self._order = []
        self._next_id = 0
        if sources is None:
            sources = range(len(pieces))
        for piece, source in zip(pieces, sources):
            self.add(piece, source)

    def __len__(self):
        return len(self._order)

    def __contains__(self, piece_id):
        return piece_id in self._pieces

    def __getitem__(self, piece_id):
        return self._pieces[piece_id]

    def add(self, piece, source=None):
        """Append a piece and return its id."""
        piece_id = self._new_id()
        self._pieces[piece_id] = piece
        self._sources[piece_id] = source
        self._order.append(piece_id)
        return piece_id

    def replace(self, keep_id, drop_id, piece):
        """Retire keep_id and drop_id; put piece in keep_id's slot. Returns the new id."""
        new_id = self._new_id()
        slot = self._order.index(keep_id)
        self._order[slot] = new_id
        self._order.remove(drop_id)
        self._sources[new_id] = self._sources.pop(keep_id)
        del self._sources[drop_id]
        del self._pieces[keep_id]
        del self._pieces[drop_id]
        self._pieces[new_id] = piece
        return new_id

    def source(self, piece_id):
        """Caller's index of the piece piece_id started from."""
        return self._sources[piece_id]

    def ids(self):
        """Snapshot of live ids in order."""
        return list(self._order)

    def pieces(self):
        return [self._pieces[piece_id] for piece_id in self._order]

    def _new_id(self):
        piece_id = self._next_id
        self._next_id += 1
        return piece_id


@trace(label="merge_pieces")
def merge_pieces(pieces, config=None, sources=None):
    """
    Merge simplified pieces until no pair can be merged.

    For each piece in order, later pieces are tried from the back of the
    list forward. A merged piece takes the slot of the earlier piece and
    keeps being tried against the rest of the scan. For a fixed input order
    the merges performed are always the same.

    Args:
        pieces: list of simplified Piece
        config: MergeConfig (optional)
        sources: caller's index for each piece, reported in errors
            (defaults to positions in pieces)

    Returns:
        list of Piece where no two can be merged

    Raises:
        SimplifyError annotated with stage "merge" and the caller's index of
        the piece that broke
    """
    tracer = get_tracer()

    if config is None:
        config = MergeConfig()

    pieces = list(pieces)
    if sources is None:
        sources = list(range(len(pieces)))

    for piece, source in zip(pieces, sources):
        try:
            enforce_structure(piece)
            enforce_simplified(piece)
        except SimplifyError as e:
            raise e.annotate(stage="merge", piece_index=source)

    working = WorkingSet(pieces, sources)
    passes = 0

    while True:
        passes += 1
        merges = _merge_pass(working, config)
        tracer.event(f"Pass {passes}: {merges} merges, {len(working)} pieces", level="DEBUG")
        if merges == 0:
            break

    return working.pieces()


def _merge_pass(working, config):
    """Run one pass over a snapshot of the working set. Returns the merge count."""
    tracer = get_tracer()

    snapshot = working.ids()
    merges = 0

    for pos, outer_id in enumerate(snapshot):
        if outer_id not in working:
            continue

        current_id = outer_id
        for inner_id in reversed(snapshot[pos + 1:]):
            if inner_id not in working:
                continue

            try:
                merged = merge_pair(working[current_id], working[inner_id], config)
            except SimplifyError as e:
                raise e.annotate(stage="merge", piece_index=working.source(current_id))

            if merged is not None:
                tracer.event(f"Merged pieces {current_id} and {inner_id}", level="DEBUG")
                current_id = working.replace(current_id, inner_id, merged)
                merges += 1

    return merges
