"""Pytest fixtures for railsimplify tests."""

import math
import tempfile

import pytest


def straight_piece(start=0.0, segments=3, step=5.0, y=0.0, visible=None, kind="rail"):
    """Build a piece running along +x from (start, y)."""
    from railsimplify.models import make_piece

    coords = [[start + i * step, y, 0.0] for i in range(segments + 1)]
    if visible is None:
        visible = [True] * segments
    return make_piece(coords, visible, kind)


def angled_piece(origin, angle_deg, segments=3, step=5.0, visible=None, kind="rail"):
    """Build a piece leaving origin at angle_deg counter-clockwise from +x."""
    from railsimplify.models import make_piece

    dx = math.cos(math.radians(angle_deg))
    dy = math.sin(math.radians(angle_deg))
    coords = [[origin[0] + i * step * dx, origin[1] + i * step * dy, 0.0] for i in range(segments + 1)]
    if visible is None:
        visible = [True] * segments
    return make_piece(coords, visible, kind)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def default_config():
    """Create default pipeline configuration."""
    from railsimplify.config import PipelineConfig
    return PipelineConfig()


@pytest.fixture
def merge_config():
    """Create default merge configuration."""
    from railsimplify.config import MergeConfig
    return MergeConfig()


@pytest.fixture
def gapped_network():
    """
    A network with one fully hidden piece and one piece with a hidden gap.

    The gapped piece splits in two, and the halves are close enough to be
    merged back across the gap.
    """
    from railsimplify.models import Network

    hidden = straight_piece(start=100.0, segments=2, y=100.0, visible=[False, False])
    gapped = straight_piece(start=0.0, segments=4, step=4.0, visible=[True, False, False, True])
    return Network(pieces=[hidden, gapped])
