"""
Loading and saving network pieces as JSON.

Pieces are stored as {"pieces": [{"points": [[x, y, z], ...],
"visible": [...], "kind": "..."}]}. Points may also be written as
{"x": .., "y": .., "z": ..} objects.
"""

import json
import os

from railsimplify.errors import SimplifyError
from railsimplify.models import Network
from railsimplify.pieces.checks import enforce_structure
from railsimplify.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def load_network(path):
    """
    Load a network description from a JSON file.

    Raises:
        pydantic.ValidationError: if the file does not match the piece schema
        InvariantViolationError: if a piece's points and flags do not line up
    """
    tracer = get_tracer()

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    network = Network.model_validate(data)

    for idx, piece in enumerate(network.pieces):
        try:
            enforce_structure(piece)
        except SimplifyError as e:
            raise e.annotate(stage="load", piece_index=idx)

    tracer.event(f"Loaded network: {path}", pieces=len(network.pieces))
    return network


def pieces_to_dict(pieces):
    """Convert pieces to the JSON-ready network layout."""
    return {
        "pieces": [
            {
                "points": [p.as_list() for p in piece.points],
                "visible": list(piece.visible),
                "kind": piece.kind,
            }
            for piece in pieces
        ]
    }


def save_json(data, path, indent=2):
    """
    Save a dictionary or Pydantic model to JSON.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_pieces(pieces, path):
    """Write pieces to a JSON file in the same layout load_network reads."""
    save_json(pieces_to_dict(pieces), path)
