"""
Ray-geometry intersection calculations for the ray tracer.

This module contains the intersection solvers for rays against the two
primitive shapes of a scene: spheres and triangles. Every solver is
vectorized over a batch of rays and reports misses as +inf, so callers can
range-filter candidates without special cases.
"""
import numpy as np

from raytrace_renders import constants
from raytrace_renders.vectors import cross, dot, length


def batch_rays(ray_origins, ray_directions):
    """
    Bring origins and directions to matching (N, 3) batches.

    Returns:
        tuple: (origins, directions, is_single)
    """
    ray_origins = np.asarray(ray_origins, dtype=float)
    ray_directions = np.asarray(ray_directions, dtype=float)

    is_single = ray_directions.ndim == 1
    if is_single:
        ray_directions = ray_directions[None, :]
    if ray_origins.ndim == 1:
        ray_origins = np.broadcast_to(ray_origins, ray_directions.shape)
    if ray_origins.shape != ray_directions.shape:
        raise ValueError(
            f"origins {ray_origins.shape} do not match directions {ray_directions.shape}")

    return ray_origins, ray_directions, is_single


def solve_quadratic_vectorized(a, b, c):
    """
    Solve at^2 + bt + c = 0 for vectorized arrays.

    Args:
        a, b, c: Arrays of quadratic coefficients

    Returns:
        tuple: (t1, t2, valid_mask) with t1 = (-b + sqrt(disc)) / 2a and
        t2 = (-b - sqrt(disc)) / 2a; both are inf where there is no real root
        or a == 0
    """
    a, b, c = np.broadcast_arrays(np.asarray(a, dtype=float),
                                  np.asarray(b, dtype=float),
                                  np.asarray(c, dtype=float))
    discriminant = b**2 - 4.0 * a * c
    valid_mask = (a > 0) & (discriminant >= 0)

    t1 = np.full(a.shape, np.inf)
    t2 = np.full(a.shape, np.inf)

    if np.any(valid_mask):
        sqrt_disc = np.sqrt(discriminant[valid_mask])
        inv_2a = 0.5 / a[valid_mask]
        t1[valid_mask] = (-b[valid_mask] + sqrt_disc) * inv_2a
        t2[valid_mask] = (-b[valid_mask] - sqrt_disc) * inv_2a

    return t1, t2, valid_mask


def intersect_sphere(ray_origins, ray_directions, center, radius):
    """
    Vectorized intersection solver for rays and a sphere.

    Both roots are returned unfiltered; the caller applies its (t_min, t_max)
    range to each independently.

    Args:
        ray_origins: (3,) shared origin or (N, 3) per-ray origins
        ray_directions: (3,) or (N, 3) ray directions (not necessarily unit)
        center: (3,) sphere center
        radius: Sphere radius

    Returns:
        tuple: (t1, t2) intersection parameters (inf where no intersection)
    """
    ray_origins, ray_directions, is_single = batch_rays(ray_origins, ray_directions)

    oc = ray_origins - np.asarray(center, dtype=float)

    a = dot(ray_directions, ray_directions)
    b = 2.0 * dot(oc, ray_directions)
    c = dot(oc, oc) - radius**2

    t1, t2, _ = solve_quadratic_vectorized(a, b, c)

    if is_single:
        return t1[0], t2[0]
    return t1, t2


def triangle_normal(a, b, c):
    """
    Unit normal of the triangle plane, (b - a) x (c - a) normalized.

    Returns:
        (3,) normal, or None for a zero-area triangle
    """
    a, b, c = (np.asarray(v, dtype=float) for v in (a, b, c))
    ab = b - a
    ac = c - a
    n = cross(ab, ac)
    n_len = length(n)
    # Relative to the edges so small triangles are not mistaken for slivers
    if n_len <= constants.PARALLEL_EPSILON * length(ab) * length(ac):
        return None
    return n / n_len


def barycentric_coordinates(points, a, b, c):
    """
    Barycentric coordinates of points lying in the plane of triangle abc.

    Solves the 2x2 system over dot products of the edge vectors AB, AC and
    the point offset AP.

    Args:
        points: (3,) or (N, 3) points in the triangle plane
        a, b, c: (3,) triangle vertices

    Returns:
        tuple: (coords, valid_mask) where coords is (N, 3) holding
        (alpha, beta, gamma) with alpha + beta + gamma == 1; rows are nan
        and valid_mask False where the system is singular
    """
    points = np.asarray(points, dtype=float)
    is_single = points.ndim == 1
    if is_single:
        points = points[None, :]

    a, b, c = (np.asarray(v, dtype=float) for v in (a, b, c))
    ab = b - a
    ac = c - a
    ap = points - a

    dot_ab = dot(ab, ab)
    dot_ab_ac = dot(ab, ac)
    dot_ac = dot(ac, ac)
    dot_ap_ab = dot(ap, ab)
    dot_ap_ac = dot(ap, ac)

    # dot_ab * dot_ac - dot_ab_ac**2, taken as |AB x AC|^2 to avoid cancellation
    n = cross(ab, ac)
    denom = dot(n, n)
    coords = np.full(points.shape, np.nan)

    if denom <= constants.PARALLEL_EPSILON**2 * dot_ab * dot_ac:
        valid_mask = np.zeros(points.shape[0], dtype=bool)
    else:
        alpha = (dot_ac * dot_ap_ab - dot_ab_ac * dot_ap_ac) / denom
        beta = (dot_ab * dot_ap_ac - dot_ab_ac * dot_ap_ab) / denom
        coords[:, 0] = alpha
        coords[:, 1] = beta
        coords[:, 2] = 1.0 - alpha - beta
        valid_mask = np.ones(points.shape[0], dtype=bool)

    if is_single:
        return coords[0], valid_mask[0]
    return coords, valid_mask


def intersect_triangle(ray_origins, ray_directions, a, b, c):
    """
    Vectorized intersection solver for rays and a triangle.

    Args:
        ray_origins: (3,) shared origin or (N, 3) per-ray origins
        ray_directions: (3,) or (N, 3) ray directions
        a, b, c: (3,) triangle vertices

    Returns:
        tuple: (t, normal) where t holds intersection parameters (inf where
        the ray is parallel, points away, or lands outside the triangle) and
        normal is the (3,) unit plane normal, or None for a zero-area
        triangle
    """
    ray_origins, ray_directions, is_single = batch_rays(ray_origins, ray_directions)
    n_rays = ray_directions.shape[0]

    t = np.full(n_rays, np.inf)
    normal = triangle_normal(a, b, c)
    if normal is None:
        return (t[0] if is_single else t), None

    n_dot_d = dot(ray_directions, normal)
    facing = np.abs(n_dot_d) > constants.PARALLEL_EPSILON * length(ray_directions)

    if np.any(facing):
        # Plane: N.(P - a) = 0 with P = O + tD
        t_plane = np.full(n_rays, np.inf)
        n_dot_ao = dot(ray_origins[facing] - np.asarray(a, dtype=float), normal)
        t_plane[facing] = -n_dot_ao / n_dot_d[facing]

        ahead = facing & (t_plane >= 0)
        if np.any(ahead):
            hit_p = ray_origins[ahead] + t_plane[ahead, None] * ray_directions[ahead]
            coords, valid = barycentric_coordinates(hit_p, a, b, c)
            inside = valid & np.all((coords >= 0.0) & (coords <= 1.0), axis=1)

            t_ahead = np.full(hit_p.shape[0], np.inf)
            t_ahead[inside] = t_plane[ahead][inside]
            t[ahead] = t_ahead

    return (t[0] if is_single else t), normal
