"""
Rendering constants and default configuration for the ray tracer.
"""

# Camera
CAMERA_ORIGIN = (0.0, 0.0, 0.0)

# Viewport (projection plane at distance d from the camera)
DEFAULT_VIEWPORT_WIDTH = 1.0
DEFAULT_VIEWPORT_HEIGHT = 1.0
DEFAULT_VIEWPORT_DISTANCE = 1.0

# Output buffer
DEFAULT_OUTPUT_WIDTH = 400
DEFAULT_OUTPUT_HEIGHT = 400
CHANNELS = 4  # RGBA
OPAQUE = 255

# Tracing
RECURSION_DEPTH = 3
PRIMARY_T_MIN = 1.0  # rays start at the viewport plane
SURFACE_EPSILON = 0.001  # offset for shadow and reflection rays
POINT_LIGHT_T_MAX = 1.0  # L is left un-normalized so t=1 is the light
NO_SPECULAR = -1

# Degenerate geometry: sine of the angle between edges (or between a ray and a
# plane) at or below this counts as zero
PARALLEL_EPSILON = 1e-12

# Colors (0-255 scale)
DEFAULT_BACKGROUND = (0.0, 0.0, 0.0)
