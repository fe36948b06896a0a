"""
Error kinds raised by the simplification pipeline.

None of these are recovered inside the pipeline. They carry the stage and
piece index where they surfaced so callers can tell which input broke.
"""


class SimplifyError(ValueError):
    """Base class for simplification failures."""

    def __init__(self, message, stage=None, piece_index=None):
        super().__init__(message)
        self.message = message
        self.stage = stage
        self.piece_index = piece_index

    def annotate(self, stage=None, piece_index=None):
        """Attach context if it is not already set. Returns self for re-raising."""
        if self.stage is None:
            self.stage = stage
        if self.piece_index is None:
            self.piece_index = piece_index
        return self

    def __str__(self):
        context = []
        if self.stage is not None:
            context.append(f"stage={self.stage}")
        if self.piece_index is not None:
            context.append(f"piece={self.piece_index}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class NotVisibleError(SimplifyError):
    """A piece without any visible segment reached a stage that needs one."""


class InvariantViolationError(SimplifyError):
    """Point/visibility count mismatch, or hidden interior segments."""


class IllegalIndexError(SimplifyError):
    """A heading was requested outside the piece's control point range."""
