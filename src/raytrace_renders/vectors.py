"""
Vector math for the ray tracer.

Every function accepts single 3-vectors of shape (3,) or batches of shape
(N, 3) and reduces over the last axis, so the same helpers serve one ray or a
whole image of rays. Shapes that are not 3-vectors, or batches that cannot be
paired element-wise, fail fast with ValueError.
"""

import numpy as np


def _as_vectors(*arrays):
    """
    Convert inputs to float arrays and check that they are 3-vectors.

    Args:
        *arrays: Array-likes of shape (3,) or (N, 3)

    Returns:
        tuple of float ndarrays

    Raises:
        ValueError: If an input is not a 3-vector / 3-vector batch, or the
            batch sizes of the inputs disagree
    """
    result = []
    for arr in arrays:
        arr = np.asarray(arr, dtype=float)
        if arr.ndim not in (1, 2) or arr.shape[-1] != 3:
            raise ValueError(f"expected (3,) or (N, 3) vectors, got shape {arr.shape}")
        result.append(arr)

    batch_sizes = {arr.shape[0] for arr in result if arr.ndim == 2}
    if len(batch_sizes) > 1:
        raise ValueError(f"mismatched batch sizes: {sorted(batch_sizes)}")
    return tuple(result)


def dot(v1, v2):
    v1, v2 = _as_vectors(v1, v2)
    return np.sum(v1 * v2, axis=-1)


def cross(v1, v2):
    v1, v2 = _as_vectors(v1, v2)
    return np.cross(v1, v2)


def add(v1, v2):
    v1, v2 = _as_vectors(v1, v2)
    return v1 + v2


def subtract(v1, v2):
    v1, v2 = _as_vectors(v1, v2)
    return v1 - v2


def scale(v, k):
    """Multiply vectors by a scalar, or a batch of vectors by (N,) scalars."""
    (v,) = _as_vectors(v)
    k = np.asarray(k, dtype=float)
    if k.ndim == 1:
        k = k[:, None]
    return v * k


def length(v):
    """Euclidean norm."""
    (v,) = _as_vectors(v)
    return np.sqrt(np.sum(v * v, axis=-1))


def normalize(v):
    """
    Scale to unit length.

    A zero vector yields NaNs; callers guard degenerate input first.
    """
    (v,) = _as_vectors(v)
    with np.errstate(divide='ignore', invalid='ignore'):
        return scale(v, 1.0 / length(v))


def reflect(ray, normal):
    """
    Mirror a ray about a normal: R = 2 (N.ray) N - ray.

    Both the light vector in Phong shading and the negated view direction in
    reflection tracing point away from the surface, so the result does too.
    """
    ray, normal = _as_vectors(ray, normal)
    return scale(normal, 2.0 * dot(normal, ray)) - ray
