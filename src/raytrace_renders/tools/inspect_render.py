import argparse
import numpy as np
import matplotlib.pyplot as plt
from raytrace_renders import constants
from raytrace_renders.core import Renderer
from raytrace_renders.scenes import SCENES, get_scene


class DebugRenderer(Renderer):
    def get_debug_maps(self, width, height):
        """
        Per-pixel diagnostics for primary rays.

        Returns:
            tuple: (distance, intensity, surface_index) arrays of shape
            (height, width); misses hold inf / 0 / NO_HIT
        """
        ray_dirs = self.pixel_directions(width, height)
        origin = np.array(constants.CAMERA_ORIGIN)

        hits = self.hit_selector.select_closest(origin, ray_dirs, constants.PRIMARY_T_MIN, np.inf)
        hit_mask = hits.hit_mask

        intensity = np.zeros(len(ray_dirs))
        if np.any(hit_mask):
            _, specular, _ = self.materials.get_surface_properties(hits.surface_index[hit_mask])
            intensity[hit_mask] = self.lighting.compute_lighting(
                hits.hit_point[hit_mask], hits.surface_normal[hit_mask],
                -ray_dirs[hit_mask], specular)

        shape = (height, width)
        return (hits.distance.reshape(shape), intensity.reshape(shape),
                hits.surface_index.reshape(shape))


def create_visualization(scene_name, width=200, height=200, depth=constants.RECURSION_DEPTH):
    renderer = DebugRenderer(get_scene(scene_name), recursion_depth=depth)

    image = renderer.render(width=width, height=height)
    distance, intensity, surface_index = renderer.get_debug_maps(width, height)

    fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(15, 5))

    ax1.imshow(image)
    ax1.set_title(f"{scene_name} (depth {depth})")

    # Misses have no distance
    masked_distance = np.ma.masked_invalid(distance)
    im2 = ax2.imshow(masked_distance, cmap="viridis")
    ax2.set_title("Primary hit distance t")
    fig.colorbar(im2, ax=ax2, fraction=0.046)

    im3 = ax3.imshow(np.ma.masked_where(surface_index < 0, intensity), cmap="inferno")
    ax3.set_title("Light intensity (unclamped)")
    fig.colorbar(im3, ax=ax3, fraction=0.046)

    for ax in (ax1, ax2, ax3):
        ax.set_xticks([])
        ax.set_yticks([])

    fig.tight_layout()
    return fig


def main():
    parser = argparse.ArgumentParser(description="Inspect primary hits and lighting of a scene")
    parser.add_argument("--scene", choices=sorted(SCENES), default="spheres")
    parser.add_argument("--res", type=int, default=200, help="Square resolution")
    parser.add_argument("--depth", type=int, default=constants.RECURSION_DEPTH)
    parser.add_argument("--save", help="Write the figure here instead of showing it")
    args = parser.parse_args()

    fig = create_visualization(args.scene, args.res, args.res, args.depth)
    if args.save:
        fig.savefig(args.save, dpi=120)
        print(f"Saved {args.save}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
