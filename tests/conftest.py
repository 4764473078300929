"""
Pytest fixtures and configuration for ray tracer tests.

This module provides shared scenes and rays so individual tests stay focused
on the property they check.
"""

import numpy as np
import pytest
from raytrace_renders.core import Renderer
from raytrace_renders.scene import (
    AmbientLight, PointLight, Scene, Sphere, Triangle,
)


@pytest.fixture
def origin():
    """Camera position."""
    return np.array([0.0, 0.0, 0.0])


@pytest.fixture
def forward():
    """Ray straight down the viewing axis."""
    return np.array([0.0, 0.0, 1.0])


@pytest.fixture
def red_sphere_scene():
    """Single matte red sphere under full ambient light."""
    return Scene(
        spheres=[Sphere(center=(0, -1, 3), radius=1, color=(255, 0, 0))],
        lights=[AmbientLight(intensity=1.0)],
        background_color=(12, 34, 56),
    )


@pytest.fixture
def mirror_scene():
    """
    Partly reflective sphere ahead of the camera and a matte green sphere
    behind it, so the mirror reflects the green sphere straight back.
    """
    return Scene(
        spheres=[
            Sphere(center=(0, 0, 5), radius=1, color=(200, 100, 50), reflective=0.3),
            Sphere(center=(0, 0, -5), radius=1, color=(0, 255, 0)),
        ],
        lights=[AmbientLight(intensity=0.5)],
    )


@pytest.fixture
def facing_mirrors_scene():
    """Two perfect mirrors facing each other with the camera between them."""
    return Scene(
        spheres=[
            Sphere(center=(0, 0, 3), radius=1, color=(255, 255, 255), reflective=1.0),
            Sphere(center=(0, 0, -3), radius=1, color=(255, 255, 255), reflective=1.0),
        ],
        lights=[AmbientLight(intensity=0.5)],
    )


@pytest.fixture
def floor_triangle():
    """Large triangle in the plane y = -1 with an upward (+y) normal."""
    return Triangle(a=(-10, -1, 0), b=(0, -1, 20), c=(10, -1, 0), color=(255, 255, 255))


@pytest.fixture
def shadow_scene(floor_triangle):
    """Floor lit by a point light overhead, with a small sphere in between."""
    return Scene(
        spheres=[Sphere(center=(0, 2, 3), radius=0.5, color=(255, 255, 255))],
        triangles=[floor_triangle],
        lights=[AmbientLight(intensity=0.2), PointLight(intensity=0.6, position=(0, 5, 3))],
    )


@pytest.fixture
def renderer(red_sphere_scene):
    """Renderer over the red sphere scene."""
    return Renderer(red_sphere_scene)
