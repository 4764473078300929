"""
Data structures and interfaces for the ray tracing pipeline.
"""
from dataclasses import dataclass

import numpy as np

from raytrace_renders import constants
from raytrace_renders.intersections import (
    batch_rays, intersect_sphere, intersect_triangle, triangle_normal,
)
from raytrace_renders.scene import LightKind, ShapeKind
from raytrace_renders.vectors import dot, length, reflect

NO_HIT = -1


@dataclass
class HitResult:
    """
    Result of ray intersection calculations.

    Attributes:
        distance: Ray parameter t of the closest hit, inf for misses (N,)
        surface_index: Index into Scene.surfaces, NO_HIT for misses (N,)
        hit_point: 3D coordinates of hit point, nan for misses (N, 3)
        surface_normal: Unit surface normal at hit point, nan for misses (N, 3)
    """
    distance: np.ndarray  # (N,) shape
    surface_index: np.ndarray  # (N,) int
    hit_point: np.ndarray  # (N, 3) shape
    surface_normal: np.ndarray  # (N, 3) shape

    def __post_init__(self):
        """Validate array shapes and types."""
        if self.distance.ndim != 1:
            raise ValueError(f"distance must be 1D array, got shape {self.distance.shape}")
        if self.surface_index.ndim != 1:
            raise ValueError(f"surface_index must be 1D array, got shape {self.surface_index.shape}")
        if self.hit_point.ndim != 2 or self.hit_point.shape[1] != 3:
            raise ValueError(f"hit_point must be (N,3) array, got shape {self.hit_point.shape}")
        if self.surface_normal.ndim != 2 or self.surface_normal.shape[1] != 3:
            raise ValueError(f"surface_normal must be (N,3) array, got shape {self.surface_normal.shape}")

        n_rays = self.distance.shape[0]
        for name in ("surface_index", "hit_point", "surface_normal"):
            if getattr(self, name).shape[0] != n_rays:
                raise ValueError(
                    f"{name} shape {getattr(self, name).shape} doesn't match distance shape {self.distance.shape}")

        if not np.issubdtype(self.surface_index.dtype, np.integer):
            raise ValueError(f"surface_index must be integer, got {self.surface_index.dtype}")

    @property
    def hit_mask(self):
        """Rays that hit any surface."""
        return self.surface_index != NO_HIT


class HitSelector:
    """
    Responsible for determining which surface each ray hits first.

    Every ray is tested against every surface in scene order (spheres, then
    triangles). A candidate replaces the current best only when it lies in
    the open interval (t_min, t_max) and is strictly closer.
    """

    def __init__(self, scene):
        """
        Args:
            scene: Scene whose surfaces are tested
        """
        self.scene = scene
        self.surfaces = scene.surfaces
        self._solvers = {
            ShapeKind.SPHERE: self._sphere_candidates,
            ShapeKind.TRIANGLE: self._triangle_candidates,
        }
        # Triangle planes never change during a render
        self._plane_normals = {
            idx: triangle_normal(s.a, s.b, s.c)
            for idx, s in enumerate(self.surfaces)
            if s.kind is ShapeKind.TRIANGLE
        }

    def _sphere_candidates(self, idx, ray_origins, ray_directions):
        sphere = self.surfaces[idx]
        return intersect_sphere(ray_origins, ray_directions, sphere.center, sphere.radius)

    def _triangle_candidates(self, idx, ray_origins, ray_directions):
        if self._plane_normals[idx] is None:
            return ()
        tri = self.surfaces[idx]
        t, _ = intersect_triangle(ray_origins, ray_directions, tri.a, tri.b, tri.c)
        return (t,)

    def _candidates(self, ray_origins, ray_directions):
        """Yield (surface index, t candidates) for every surface in scan order."""
        for idx, surface in enumerate(self.surfaces):
            solver = self._solvers[surface.kind]
            for t in solver(idx, ray_origins, ray_directions):
                yield idx, t

    def select_closest(self, ray_origins, ray_directions, t_min, t_max) -> HitResult:
        """
        Find the closest intersection for each ray.

        Args:
            ray_origins: (3,) shared origin or (N, 3) per-ray origins
            ray_directions: (3,) or (N, 3) ray directions
            t_min: Exclusive lower bound of the valid ray parameter
            t_max: Exclusive upper bound of the valid ray parameter

        Returns:
            HitResult with the closest intersection for all rays (always
            batched, N=1 for a single ray)
        """
        ray_origins, ray_directions, _ = batch_rays(ray_origins, ray_directions)
        n_rays = ray_directions.shape[0]

        best_t = np.full(n_rays, np.inf)
        best_idx = np.full(n_rays, NO_HIT, dtype=int)

        for idx, t in self._candidates(ray_origins, ray_directions):
            accept = (t > t_min) & (t < t_max) & (t < best_t)
            best_t[accept] = t[accept]
            best_idx[accept] = idx

        hit_points = np.full((n_rays, 3), np.nan)
        normals = np.full((n_rays, 3), np.nan)

        hits = best_idx != NO_HIT
        if np.any(hits):
            hit_points[hits] = ray_origins[hits] + best_t[hits, None] * ray_directions[hits]

        for idx in np.unique(best_idx[hits]):
            surface = self.surfaces[idx]
            mask = best_idx == idx
            if surface.kind is ShapeKind.SPHERE:
                # Outward normal at the exact hit point
                normals[mask] = (hit_points[mask] - np.asarray(surface.center)) / surface.radius
            else:
                normals[mask] = self._plane_normals[idx]

        return HitResult(
            distance=best_t,
            surface_index=best_idx,
            hit_point=hit_points,
            surface_normal=normals,
        )

    def occluded(self, ray_origins, ray_directions, t_min, t_max):
        """
        Test whether anything lies on each ray within (t_min, t_max).

        Returns:
            (N,) boolean mask, True where some surface blocks the ray
        """
        ray_origins, ray_directions, _ = batch_rays(ray_origins, ray_directions)
        blocked = np.zeros(ray_directions.shape[0], dtype=bool)

        for _, t in self._candidates(ray_origins, ray_directions):
            blocked |= (t > t_min) & (t < t_max)

        return blocked


class MaterialSystem:
    """
    Responsible for looking up surface materials for hit results.
    """

    def __init__(self, scene):
        surfaces = scene.surfaces
        self.colors = np.array([s.color for s in surfaces], dtype=float).reshape(-1, 3)
        self.specular = np.array([s.specular for s in surfaces], dtype=float)
        self.reflective = np.array([s.reflective for s in surfaces], dtype=float)

    def get_surface_properties(self, surface_index):
        """
        Materials for hit surfaces.

        Args:
            surface_index: (M,) indices of surfaces that were hit (no misses)

        Returns:
            tuple: (colors (M, 3), specular (M,), reflective (M,))
        """
        return (self.colors[surface_index],
                self.specular[surface_index],
                self.reflective[surface_index])


class LightingModel:
    """
    Responsible for the scalar light intensity arriving at shaded points.

    Ambient lights always contribute. Point and directional lights contribute
    diffuse and specular terms only when the shadow ray toward them is clear.
    """

    def __init__(self, scene, hit_selector):
        """
        Args:
            scene: Scene providing the lights
            hit_selector: HitSelector used for shadow rays
        """
        self.lights = scene.lights
        self.hit_selector = hit_selector

    def _light_vectors(self, light, points):
        """Un-normalized vector toward the light and the shadow ray upper bound."""
        if light.kind is LightKind.POINT:
            return np.asarray(light.position) - points, constants.POINT_LIGHT_T_MAX
        return np.broadcast_to(np.asarray(light.direction), points.shape), np.inf

    def compute_lighting(self, points, normals, view_dirs, specular):
        """
        Vectorized Phong lighting with binary shadows.

        Args:
            points: (3,) or (N, 3) shaded points
            normals: (3,) or (N, 3) surface normals
            view_dirs: (3,) or (N, 3) vectors from the points toward the viewer
            specular: Phong exponent, scalar or (N,); NO_SPECULAR disables it

        Returns:
            Light intensity per point (N,), or a float for a single point.
            Not clamped; values above 1 are possible.
        """
        points = np.asarray(points, dtype=float)
        is_single = points.ndim == 1
        if is_single:
            points = points[None, :]
            normals = np.asarray(normals, dtype=float)[None, :]
            view_dirs = np.asarray(view_dirs, dtype=float)[None, :]
        n_points = points.shape[0]
        specular = np.broadcast_to(np.asarray(specular, dtype=float), (n_points,))

        intensity = np.zeros(n_points)

        for light in self.lights:
            if light.kind is LightKind.AMBIENT:
                intensity += light.intensity
                continue

            L, t_max = self._light_vectors(light, points)
            lit = ~self.hit_selector.occluded(points, L, constants.SURFACE_EPSILON, t_max)

            # Diffuse
            n_dot_l = dot(normals, L)
            diffuse = lit & (n_dot_l > 0)
            if np.any(diffuse):
                intensity[diffuse] += (light.intensity * n_dot_l[diffuse]
                                       / (length(normals[diffuse]) * length(L[diffuse])))

            # Specular
            shiny = lit & (specular != constants.NO_SPECULAR)
            if np.any(shiny):
                R = reflect(L[shiny], normals[shiny])
                V = view_dirs[shiny]
                r_dot_v = dot(R, V)
                facing = r_dot_v > 0
                if np.any(facing):
                    cos_rv = r_dot_v[facing] / (length(R[facing]) * length(V[facing]))
                    contribution = np.zeros(r_dot_v.shape)
                    contribution[facing] = light.intensity * cos_rv ** specular[shiny][facing]
                    intensity[shiny] += contribution

        return float(intensity[0]) if is_single else intensity
