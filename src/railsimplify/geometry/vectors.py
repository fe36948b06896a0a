"""
Point arithmetic used by the merge test.
"""

import math

from railsimplify.models import Point


def distance_squared(a, b):
    """Square of the distance between two points."""
    dx = b.x - a.x
    dy = b.y - a.y
    dz = b.z - a.z
    return dx * dx + dy * dy + dz * dz


def midpoint(a, b):
    """Component-wise midpoint of two points."""
    return Point(
        x=(a.x + b.x) / 2,
        y=(a.y + b.y) / 2,
        z=(a.z + b.z) / 2,
    )


def vector_heading(va, vb, legacy=False):
    """
    Heading in degrees of the vector from va to vb.

    0 is north (+y), 90 is east (+x). The z component is ignored.

    With legacy=True the east component is taken as vb.x - va.y, which is
    what older exports were computed with.
    """
    if legacy:
        east = vb.x - va.y
    else:
        east = vb.x - va.x
    north = vb.y - va.y
    return math.degrees(math.atan2(east, north))
