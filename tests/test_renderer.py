import numpy as np
import pytest
from raytrace_renders.core import Renderer, render
from raytrace_renders.scene import AmbientLight, Scene, Sphere, Viewport
from raytrace_renders.scenes import SCENES, get_scene


def test_ambient_sphere_color_and_background(renderer):
    toward_center = np.array([0.0, -1.0, 3.0])
    color = renderer.get_color(toward_center / np.linalg.norm(toward_center))
    np.testing.assert_allclose(color, [255.0, 0.0, 0.0])

    miss = renderer.get_color(np.array([0.0, 1.0, 1.0]))
    np.testing.assert_array_equal(miss, [12.0, 34.0, 56.0])


def test_primary_rays_start_at_viewport():
    """Surfaces closer than t = 1 along the primary ray are not visible."""
    scene = Scene(spheres=[Sphere(center=(0, 0, 0.5), radius=0.1, color=(255, 255, 255))],
                  lights=[AmbientLight(1.0)], background_color=(1, 2, 3))
    color = Renderer(scene).get_color(np.array([0.0, 0.0, 1.0]))
    np.testing.assert_array_equal(color, [1.0, 2.0, 3.0])


def test_reflection_blend(mirror_scene, origin, forward):
    """
    A 30% mirror blends 70% of its own color with 30% of the green sphere
    behind the camera.
    """
    renderer = Renderer(mirror_scene)
    local = np.array([100.0, 50.0, 25.0])
    reflected = np.array([0.0, 127.5, 0.0])

    color = renderer.trace_rays(origin, forward, 1.0, np.inf, 1)
    np.testing.assert_allclose(color, local * 0.7 + reflected * 0.3)
    np.testing.assert_allclose(color, [70.0, 73.25, 17.5])


def test_depth_zero_returns_local_color(mirror_scene, origin, forward):
    renderer = Renderer(mirror_scene)
    color = renderer.trace_rays(origin, forward, 1.0, np.inf, 0)
    np.testing.assert_allclose(color, [100.0, 50.0, 25.0])


def test_reflection_miss_blends_background(origin, forward):
    scene = Scene(spheres=[Sphere(center=(0, 0, 5), radius=1, color=(200, 200, 200), reflective=0.5)],
                  lights=[AmbientLight(1.0)], background_color=(0, 0, 100))
    color = Renderer(scene).trace_rays(origin, forward, 1.0, np.inf, 3)
    np.testing.assert_allclose(color, [100.0, 100.0, 150.0])


class CountingRenderer(Renderer):
    def __init__(self, scene):
        super().__init__(scene)
        self.depths = []

    def trace_rays(self, ray_origins, ray_directions, t_min, t_max, depth):
        self.depths.append(depth)
        return super().trace_rays(ray_origins, ray_directions, t_min, t_max, depth)


def test_facing_mirrors_terminate(facing_mirrors_scene, origin, forward):
    """Recursion stops after `depth` bounces even between perfect mirrors."""
    renderer = CountingRenderer(facing_mirrors_scene)

    color = renderer.trace_rays(origin, forward, 0.001, np.inf, 5)

    assert renderer.depths == [5, 4, 3, 2, 1, 0]
    np.testing.assert_allclose(color, [127.5, 127.5, 127.5])


def test_batch_matches_single_rays(mirror_scene, origin):
    renderer = Renderer(mirror_scene)
    directions = np.array([[0.0, 0.0, 1.0], [0.1, 0.05, 1.0], [0.0, 1.0, 1.0]])

    batch = renderer.trace_rays(origin, directions, 1.0, np.inf, 3)

    assert batch.shape == (3, 3)
    for i, d in enumerate(directions):
        np.testing.assert_allclose(renderer.trace_rays(origin, d, 1.0, np.inf, 3), batch[i])


def test_buffer_layout(renderer):
    image = renderer.render(width=12, height=8)

    assert image.shape == (8, 12, 4)
    assert image.dtype == np.uint8
    assert image.ravel().size == 12 * 8 * 4
    assert np.all(image[:, :, 3] == 255)


def test_y_axis_flipped_on_write():
    """Rows grow downward while viewport y grows upward."""
    scene = Scene(spheres=[Sphere(center=(0, 2, 5), radius=1, color=(255, 255, 255))],
                  lights=[AmbientLight(1.0)])
    image = Renderer(scene).render(width=20, height=20)

    np.testing.assert_array_equal(image[2, 10], [255, 255, 255, 255])
    np.testing.assert_array_equal(image[18, 10], [0, 0, 0, 255])


def test_pixel_directions_are_centered(renderer):
    directions = renderer.pixel_directions(4, 2).reshape(2, 4, 3)

    # First row is the top of the viewport, first column the left edge
    np.testing.assert_allclose(directions[0, 0], [-0.5, 0.5, 1.0])
    np.testing.assert_allclose(directions[1, 2], [0.0, 0.0, 1.0])


def test_channels_clamped():
    scene = Scene(spheres=[Sphere(center=(0, 0, 5), radius=2, color=(200, 10, 0))],
                  lights=[AmbientLight(2.0)])
    image = Renderer(scene).render(width=10, height=10)
    np.testing.assert_array_equal(image[5, 5], [255, 20, 0, 255])


def test_render_uses_given_viewport():
    """The viewport arguments override the scene's own viewport."""
    scene = Scene(spheres=[Sphere(center=(0, 0, 50), radius=2, color=(255, 255, 255))],
                  lights=[AmbientLight(1.0)], viewport=Viewport(1, 1, 1))

    wide = render(scene, 1, 1, 1, 20, 20)
    narrow = render(scene, 1, 1, 20, 20, 20)

    np.testing.assert_array_equal(wide[10, 10], [255, 255, 255, 255])
    np.testing.assert_array_equal(wide[10, 0], [0, 0, 0, 255])
    np.testing.assert_array_equal(narrow[10, 0], [255, 255, 255, 255])


def test_invalid_output_size(renderer, red_sphere_scene):
    with pytest.raises(ValueError):
        renderer.render(width=0, height=10)
    with pytest.raises(ValueError):
        render(red_sphere_scene, 1, 1, 1, 10, -1)
    with pytest.raises(ValueError):
        render(red_sphere_scene, 0, 1, 1, 10, 10)


@pytest.mark.parametrize("name", sorted(SCENES))
def test_builtin_scenes_render(name):
    image = Renderer(get_scene(name)).render(width=16, height=16)

    assert image.shape == (16, 16, 4)
    assert len(np.unique(image.reshape(-1, 4), axis=0)) > 1


if __name__ == "__main__":
    pytest.main([__file__])
