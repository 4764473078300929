import argparse
import logging
import os
import sys
import time
import numpy as np
import PIL.Image
from raytrace_renders import constants
from raytrace_renders.core import Renderer
from raytrace_renders.intersections import intersect_sphere
from raytrace_renders.scene import AmbientLight, Scene, Sphere
from raytrace_renders.scenes import SCENES, get_scene

def generate_samples(width=constants.DEFAULT_OUTPUT_WIDTH, height=constants.DEFAULT_OUTPUT_HEIGHT,
                     depth=constants.RECURSION_DEPTH, names=None):
    """Render every built-in scene to a PNG under output/."""
    print(f"\n--- Generating Samples ({width}x{height}, depth {depth}) ---")
    os.makedirs("output", exist_ok=True)

    for name in names or sorted(SCENES):
        print(f"Rendering {name}...")
        renderer = Renderer(get_scene(name), recursion_depth=depth)
        t0 = time.time()
        img = renderer.render(width=width, height=height)
        print(f"  Complete in {time.time() - t0:.2f}s")
        PIL.Image.fromarray(img).save(os.path.join("output", f"{name}_{width}x{height}.png"))

def run_verification():
    """Run numerical consistency checks on the tracer. Returns True if all pass."""
    print("\n--- Tracer Verification ---")
    results = []

    # Sphere roots through the center
    center, r = np.array([0.0, 0.0, 5.0]), 1.5
    t1, t2 = intersect_sphere(np.zeros(3), np.array([0.0, 0.0, 1.0]), center, r)
    ok = np.isclose(min(t1, t2), 5.0 - r) and np.isclose(max(t1, t2), 5.0 + r)
    results.append(("Sphere roots at d -/+ r", ok))

    # Ambient-lit red sphere
    scene = Scene(spheres=[Sphere(center=(0, -1, 3), radius=1, color=(255, 0, 0))],
                  lights=[AmbientLight(intensity=1.0)],
                  background_color=(10, 20, 30))
    renderer = Renderer(scene)
    nearest = np.array([0.0, -1.0, 3.0])  # toward the center
    color = renderer.get_color(nearest / np.linalg.norm(nearest))
    results.append(("Ambient red sphere is (255, 0, 0)", np.allclose(color, [255, 0, 0])))
    miss = renderer.get_color(np.array([0.0, 1.0, 1.0]))
    results.append(("Miss returns background", np.array_equal(miss, [10, 20, 30])))

    # Facing mirrors terminate
    mirrors = Scene(spheres=[Sphere(center=(0, 0, 3), radius=1, color=(255, 255, 255), reflective=1.0),
                             Sphere(center=(0, 0, -3), radius=1, color=(255, 255, 255), reflective=1.0)],
                    lights=[AmbientLight(intensity=0.5)])
    color = Renderer(mirrors).trace_rays(np.zeros(3), np.array([0.0, 0.0, 1.0]), 0.001, np.inf, 10)
    results.append(("Facing mirrors terminate", bool(np.all(np.isfinite(color)))))

    for name, ok in results:
        print(f"{'PASS' if ok else 'FAIL'}: {name}")
    return all(ok for _, ok in results)

def main():
    parser = argparse.ArgumentParser(description="Recursive Ray Tracer CLI")
    parser.add_argument("--ui", action="store_true", help="Launch the interactive Gradio UI")
    parser.add_argument("--samples", action="store_true", help="Render every built-in scene to output/")
    parser.add_argument("--verify", action="store_true", help="Run numerical consistency checks")
    parser.add_argument("--scene", choices=sorted(SCENES), action="append",
                        help="Restrict --samples to this scene (repeatable)")
    parser.add_argument("--width", type=int, default=constants.DEFAULT_OUTPUT_WIDTH, help="Output width in pixels")
    parser.add_argument("--height", type=int, default=constants.DEFAULT_OUTPUT_HEIGHT, help="Output height in pixels")
    parser.add_argument("--depth", type=int, default=constants.RECURSION_DEPTH, help="Reflection recursion depth")
    parser.add_argument("--verbose", action="store_true", help="Log render progress")

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    if args.ui:
        from raytrace_renders.ui import CSS, create_ui
        print("Launching UI...")
        demo = create_ui()
        demo.launch(css=CSS)
    elif args.samples:
        generate_samples(args.width, args.height, args.depth, args.scene)
    elif args.verify:
        if not run_verification():
            sys.exit(1)
    else:
        parser.print_help()

def run_ui():
    """Entry point for raytrace-ui command."""
    sys.argv = [sys.argv[0], "--ui"]
    main()

def run_verify():
    """Entry point for raytrace-verify command."""
    sys.argv = [sys.argv[0], "--verify"]
    main()

def run_samples():
    """Entry point for raytrace-samples command."""
    sys.argv = [sys.argv[0], "--samples"]
    main()

if __name__ == "__main__":
    main()
