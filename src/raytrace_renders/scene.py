"""
Scene model for the ray tracer.

A scene is an immutable bundle of surfaces (spheres and triangles), lights,
the viewport geometry and the background color. It is built once before
rendering and only read while tracing.
"""
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from raytrace_renders import constants


class ShapeKind(Enum):
    """Tag identifying which geometry a surface carries."""
    SPHERE = "sphere"
    TRIANGLE = "triangle"


class LightKind(Enum):
    """Tag identifying a light variant."""
    AMBIENT = "ambient"
    POINT = "point"
    DIRECTIONAL = "directional"


def _vec3(value, name):
    """Freeze a 3-vector as a tuple of floats."""
    arr = np.asarray(value, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"{name} must be a 3-vector, got shape {arr.shape}")
    return tuple(float(x) for x in arr)


def _validate_surface(surface):
    object.__setattr__(surface, "color", _vec3(surface.color, "color"))
    if not 0.0 <= surface.reflective <= 1.0:
        raise ValueError(f"reflective must be in [0, 1], got {surface.reflective}")
    if surface.specular != constants.NO_SPECULAR and surface.specular < 0:
        raise ValueError(
            f"specular must be >= 0 or {constants.NO_SPECULAR} to disable, got {surface.specular}")


@dataclass(frozen=True)
class Sphere:
    """
    Sphere surface.

    Attributes:
        center: Sphere center (x, y, z)
        radius: Radius, strictly positive
        color: Base RGB color on the 0-255 scale
        specular: Phong exponent, or -1 to disable highlights
        reflective: Fraction of color taken from the mirror reflection
    """
    center: tuple
    radius: float
    color: tuple
    specular: float = constants.NO_SPECULAR
    reflective: float = 0.0

    kind = ShapeKind.SPHERE

    def __post_init__(self):
        object.__setattr__(self, "center", _vec3(self.center, "center"))
        if not self.radius > 0:
            raise ValueError(f"radius must be positive, got {self.radius}")
        _validate_surface(self)


@dataclass(frozen=True)
class Triangle:
    """
    Flat-shaded triangle surface with vertices a, b, c.

    Degenerate (zero-area) triangles are accepted and are simply never hit.
    """
    a: tuple
    b: tuple
    c: tuple
    color: tuple
    specular: float = constants.NO_SPECULAR
    reflective: float = 0.0

    kind = ShapeKind.TRIANGLE

    def __post_init__(self):
        for name in ("a", "b", "c"):
            object.__setattr__(self, name, _vec3(getattr(self, name), name))
        _validate_surface(self)


def _validate_intensity(light):
    if light.intensity < 0:
        raise ValueError(f"light intensity must be non-negative, got {light.intensity}")


@dataclass(frozen=True)
class AmbientLight:
    intensity: float

    kind = LightKind.AMBIENT

    def __post_init__(self):
        _validate_intensity(self)


@dataclass(frozen=True)
class PointLight:
    intensity: float
    position: tuple

    kind = LightKind.POINT

    def __post_init__(self):
        _validate_intensity(self)
        object.__setattr__(self, "position", _vec3(self.position, "position"))


@dataclass(frozen=True)
class DirectionalLight:
    """Light arriving from a fixed direction; `direction` points toward the light."""
    intensity: float
    direction: tuple

    kind = LightKind.DIRECTIONAL

    def __post_init__(self):
        _validate_intensity(self)
        object.__setattr__(self, "direction", _vec3(self.direction, "direction"))


@dataclass(frozen=True)
class Viewport:
    """Projection rectangle of size width x height at `distance` from the camera."""
    width: float = constants.DEFAULT_VIEWPORT_WIDTH
    height: float = constants.DEFAULT_VIEWPORT_HEIGHT
    distance: float = constants.DEFAULT_VIEWPORT_DISTANCE

    def __post_init__(self):
        for name in ("width", "height", "distance"):
            if not getattr(self, name) > 0:
                raise ValueError(f"viewport {name} must be positive, got {getattr(self, name)}")


@dataclass(frozen=True)
class Scene:
    """
    Everything the tracer reads during a render.

    Sequences are frozen to tuples on construction so a scene cannot be
    mutated mid-render.
    """
    spheres: tuple = ()
    triangles: tuple = ()
    lights: tuple = ()
    viewport: Viewport = field(default_factory=Viewport)
    background_color: tuple = constants.DEFAULT_BACKGROUND

    def __post_init__(self):
        object.__setattr__(self, "spheres", tuple(self.spheres))
        object.__setattr__(self, "triangles", tuple(self.triangles))
        object.__setattr__(self, "lights", tuple(self.lights))
        object.__setattr__(self, "background_color",
                           _vec3(self.background_color, "background_color"))

        for sphere in self.spheres:
            if getattr(sphere, "kind", None) is not ShapeKind.SPHERE:
                raise ValueError(f"spheres may only hold Sphere surfaces, got {sphere!r}")
        for triangle in self.triangles:
            if getattr(triangle, "kind", None) is not ShapeKind.TRIANGLE:
                raise ValueError(f"triangles may only hold Triangle surfaces, got {triangle!r}")
        for light in self.lights:
            if not isinstance(getattr(light, "kind", None), LightKind):
                raise ValueError(f"lights may only hold Ambient, Point or Directional lights, got {light!r}")

    @property
    def surfaces(self):
        """All surfaces in scan order: spheres first, then triangles."""
        return self.spheres + self.triangles
