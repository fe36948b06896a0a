"""
Angle helpers working in degrees.
"""

import math

import numpy as np


def circular_mean(*angles):
    """
    Circular mean of any number of angles, in degrees.

    Sums the sine and cosine components so that angles on either side of
    the +-180 wrap average correctly (179 and -179 give 180, not 0).
    """
    if not angles:
        raise ValueError("circular_mean needs at least one angle")

    rads = np.radians(np.asarray(angles, dtype=float))
    x = np.sum(np.sin(rads))
    y = np.sum(np.cos(rads))
    return float(np.degrees(np.arctan2(x, y)))


def normalize_angle(angle):
    """Map an angle in degrees into the range (-180, 180]."""
    # fmod keeps the sign of the dividend
    angle = math.fmod(angle, 360.0)
    if angle > 180:
        return angle - 360.0
    if angle <= -180:
        return angle + 360.0
    return angle


def bearing(heading_a, heading_b):
    """Absolute angular difference between two headings, in [0, 180]."""
    return abs(normalize_angle(heading_a - heading_b))
