"""
Built-in scenes.
"""
from raytrace_renders.scene import (
    AmbientLight, DirectionalLight, PointLight, Scene, Sphere, Triangle,
)

# Shared three-light rig: soft ambient fill, a key point light, a directional rim
DEFAULT_LIGHTS = (
    AmbientLight(intensity=0.2),
    PointLight(intensity=0.6, position=(2.0, 1.0, 0.0)),
    DirectionalLight(intensity=0.2, direction=(1.0, 4.0, 4.0)),
)


def triangle_scene():
    """Two reflective cyan triangles: a small one facing the camera and a long strip receding along +z."""
    cyan = (0, 255, 255)
    return Scene(
        triangles=(
            Triangle(a=(0, 0.1, 2), b=(0.2, -0.1, 2), c=(-0.2, -0.1, 2),
                     color=cyan, specular=500, reflective=0.3),
            Triangle(a=(0, 0.1, 2), b=(0.2, -0.1, 2), c=(0.2, -0.1, 40),
                     color=cyan, specular=500, reflective=0.3),
        ),
        lights=DEFAULT_LIGHTS,
    )


def spheres_scene():
    """Red, blue and green spheres resting on a huge yellow floor sphere."""
    return Scene(
        spheres=(
            Sphere(center=(0, -1, 3), radius=1, color=(255, 0, 0),
                   specular=500, reflective=0.2),
            Sphere(center=(2, 0, 4), radius=1, color=(0, 0, 255),
                   specular=500, reflective=0.3),
            Sphere(center=(-2, 0, 4), radius=1, color=(0, 255, 0),
                   specular=10, reflective=0.4),
            Sphere(center=(0, -5001, 0), radius=5000, color=(255, 255, 0),
                   specular=1000, reflective=0.5),
        ),
        lights=DEFAULT_LIGHTS,
    )


SCENES = {
    "triangles": triangle_scene,
    "spheres": spheres_scene,
}


def get_scene(name):
    """Build a registered scene by name."""
    if name not in SCENES:
        raise ValueError(f"unknown scene {name!r}; choose from {sorted(SCENES)}")
    return SCENES[name]()
