import dataclasses
import functools
import logging
import time

import numpy as np

from raytrace_renders import constants
from raytrace_renders.intersections import batch_rays
from raytrace_renders.rendering import HitSelector, LightingModel, MaterialSystem
from raytrace_renders.scene import Viewport
from raytrace_renders.vectors import reflect

logger = logging.getLogger(__name__)


class Renderer:
    def __init__(self, scene, recursion_depth=None):
        """
        Initialize the renderer for a fixed scene.

        Coordinate System (Camera-Centric):
        - Origin (0,0,0): The camera position.
        - Z-Axis: Viewing direction; the viewport plane sits at z = d.
        - Y-Axis: Up. Canvas rows grow downward, so y is flipped on write.
        - X-Axis: Right.
        """
        self.scene = scene
        self.recursion_depth = (recursion_depth if recursion_depth is not None
                                else constants.RECURSION_DEPTH)
        self.background = np.asarray(scene.background_color, dtype=float)

        self.hit_selector = HitSelector(scene)
        self.materials = MaterialSystem(scene)
        self.lighting = LightingModel(scene, self.hit_selector)

    def canvas_to_viewport(self, x, y, canvas_width, canvas_height):
        """
        Map centered canvas coordinates to directions through the viewport.

        Args:
            x, y: Canvas coordinates relative to the canvas center (scalars or arrays)
            canvas_width, canvas_height: Canvas size in pixels

        Returns:
            (3,) or (..., 3) ray directions (x * Vw / Cw, y * Vh / Ch, d)
        """
        viewport = self.scene.viewport
        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)
        x, y = np.broadcast_arrays(x, y)
        return np.stack([x * viewport.width / canvas_width,
                         y * viewport.height / canvas_height,
                         np.full(x.shape, float(viewport.distance))], axis=-1)

    def pixel_directions(self, width, height):
        """
        Primary ray directions for every pixel of a width x height buffer.

        Returns:
            (height * width, 3) directions in row-major pixel order
        """
        # Column i holds x = i - W/2; row j holds y = H/2 - j (y up, rows down)
        xs = np.arange(width) - width // 2
        ys = height // 2 - np.arange(height)
        px, py = np.meshgrid(xs, ys)
        return self.canvas_to_viewport(px, py, width, height).reshape(-1, 3)

    def trace_rays(self, ray_origins, ray_directions, t_min, t_max, depth):
        """
        Calculate the color seen along each ray.

        Vectorized for N rays; reflections recurse on the subset of rays that
        hit a reflective surface, one level per call, so recursion depth is
        bounded by `depth` regardless of scene geometry.

        Args:
            ray_origins: (3,) shared origin or (N, 3) per-ray origins
            ray_directions: (3,) or (N, 3) directions
            t_min, t_max: Open interval of accepted ray parameters
            depth: Remaining reflection bounces

        Returns:
            (N, 3) float RGB colors, unclamped, or (3,) for a single ray
        """
        ray_origins, ray_directions, is_single = batch_rays(ray_origins, ray_directions)
        n_rays = ray_directions.shape[0]

        colors = np.tile(self.background, (n_rays, 1))

        hits = self.hit_selector.select_closest(ray_origins, ray_directions, t_min, t_max)
        hit_mask = hits.hit_mask
        if np.any(hit_mask):
            colors[hit_mask] = self._shade(hits, ray_directions, hit_mask, depth)

        return colors[0] if is_single else colors

    def _shade(self, hits, ray_directions, hit_mask, depth):
        """Local Phong color plus the mirror reflection for rays that hit."""
        points = hits.hit_point[hit_mask]
        normals = hits.surface_normal[hit_mask]
        view = -ray_directions[hit_mask]
        base_color, specular, reflective = self.materials.get_surface_properties(
            hits.surface_index[hit_mask])

        intensity = self.lighting.compute_lighting(points, normals, view, specular)
        local = base_color * intensity[:, None]

        if depth <= 0:
            return local

        bounce = reflective > 0
        if not np.any(bounce):
            return local

        r = reflective[bounce][:, None]
        reflected = self.trace_rays(points[bounce],
                                    reflect(view[bounce], normals[bounce]),
                                    constants.SURFACE_EPSILON, np.inf, depth - 1)
        local[bounce] = local[bounce] * (1 - r) + reflected * r
        return local

    def get_color(self, ray_directions, depth=None):
        """Trace primary rays from the camera through viewport directions."""
        depth = self.recursion_depth if depth is None else depth
        return self.trace_rays(np.array(constants.CAMERA_ORIGIN), ray_directions,
                               constants.PRIMARY_T_MIN, np.inf, depth)

    def _render_frame(self, width, height, depth):
        """Trace every pixel into a fresh, writable RGBA buffer."""
        colors = self.get_color(self.pixel_directions(width, height), depth=depth)

        image = np.empty((height, width, constants.CHANNELS), dtype=np.uint8)
        image[:, :, :3] = np.rint(np.clip(colors, 0, 255)).reshape(height, width, 3)
        image[:, :, 3] = constants.OPAQUE
        return image

    @functools.lru_cache(maxsize=32)
    def _render_cached(self, width, height, depth):
        """
        Internal cached render call using hashable arguments.
        """
        image = self._render_frame(width, height, depth)
        image.setflags(write=False)
        return image

    def render(self, width=constants.DEFAULT_OUTPUT_WIDTH,
               height=constants.DEFAULT_OUTPUT_HEIGHT, depth=None, cache=True):
        """
        Render the scene to an RGBA pixel buffer.

        Args:
            cache: Reuse frames across calls. Cached frames are shared and
                read-only; with cache=False a private writable frame is
                returned and nothing is retained.

        Returns:
            (height, width, 4) uint8 array in row-major order; alpha is
            always opaque
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"output size must be positive, got {width}x{height}")
        depth = self.recursion_depth if depth is None else depth

        logger.info("Rendering %dx%d (depth %d, %d surfaces, %d lights)",
                    width, height, depth, len(self.scene.surfaces), len(self.scene.lights))
        t0 = time.time()
        if cache:
            image = self._render_cached(int(width), int(height), int(depth))
        else:
            image = self._render_frame(int(width), int(height), int(depth))
        logger.debug("Render finished in %.3fs", time.time() - t0)
        return image

    def clear(self):
        """Drop cached frames."""
        self._render_cached.cache_clear()


def render(scene, viewport_width, viewport_height, viewport_distance,
           output_width, output_height):
    """
    Render `scene` through the given viewport into an RGBA buffer.

    The viewport arguments replace the scene's own viewport for this call.
    The renderer is discarded afterwards, so the frame bypasses the cache.

    Returns:
        Writable (output_height, output_width, 4) uint8 array; `.ravel()`
        gives the row-major RGBA byte sequence of length
        output_width * output_height * 4
    """
    viewport = Viewport(viewport_width, viewport_height, viewport_distance)
    renderer = Renderer(dataclasses.replace(scene, viewport=viewport))
    return renderer.render(output_width, output_height, cache=False)
