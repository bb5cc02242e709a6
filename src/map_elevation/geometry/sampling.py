"""Reduce dense drawn paths to a bounded set of representative points."""

import math
from collections.abc import Sequence

from map_elevation.geometry.schemas import Path, ProjectedPoint

DEFAULT_MAX_SAMPLES = 20


def sample_segment(points: Sequence[ProjectedPoint], max_samples: int) -> list[ProjectedPoint]:
    """Pick at most ``max_samples`` evenly spaced points from one segment.

    Segments that already fit are returned unchanged. Longer segments keep
    their first and last points; indices are rounded half-up, and repeated
    indices are kept because the profile is plotted by position.

    Args:
        points: The segment's vertices in drawing order.
        max_samples: Upper bound on the number of returned points.

    Returns:
        The sampled vertices in drawing order.
    """
    if max_samples < 1:
        raise ValueError(f"max_samples must be at least 1, got {max_samples}")

    count = len(points)
    if count <= max_samples:
        return list(points)
    if max_samples == 1:
        return [points[0]]

    last = count - 1
    return [
        points[min(math.floor(i * last / (max_samples - 1) + 0.5), last)]
        for i in range(max_samples)
    ]


def sample_path(path: Path, max_samples: int = DEFAULT_MAX_SAMPLES) -> list[ProjectedPoint]:
    """Sample every segment of ``path`` and concatenate the results in order.

    Empty segments contribute nothing; there is no merging across segments,
    so the result may hold up to ``max_samples`` points per segment.
    """
    samples: list[ProjectedPoint] = []
    for segment in path.segments:
        samples.extend(sample_segment(segment, max_samples))
    return samples
