import gradio as gr
import PIL.Image
from . import constants
from .core import Renderer
from .scenes import SCENES, get_scene

# Keep the previous frame visible while a new one renders.
CSS = """
.gradio-container { background-color: #0b0f19 !important; color: #e5e7eb !important; }
#output_img { background-color: #0b0f19 !important; border-radius: 8px; overflow: hidden; border: none !important; }
#output_img img { object-fit: contain; image-rendering: pixelated; }

.generating, .pending {
    opacity: 1 !important;
    filter: none !important;
    transition: none !important;
}

.loading, .progress-view, .loader, .spinner {
    display: none !important;
    visibility: hidden !important;
}
"""

DEFAULT_SCENE = "triangles"


def create_ui():

    # One renderer per scene so its frame cache survives re-renders
    renderers = {name: Renderer(get_scene(name)) for name in SCENES}

    def render_frame(scene_name, width, height, depth):
        image_data = renderers[scene_name].render(
            width=int(width), height=int(height), depth=int(depth))
        return PIL.Image.fromarray(image_data)

    with gr.Blocks(title="Ray Tracer") as demo:

        gr.Markdown("# Recursive Ray Tracer")
        gr.Markdown("Spheres and triangles with Phong lighting, hard shadows and mirror reflections.")

        with gr.Row():
            with gr.Column(scale=1):
                with gr.Group():
                    gr.Markdown("### 🖼️ Canvas")
                    scene_dropdown = gr.Dropdown(choices=sorted(SCENES), value=DEFAULT_SCENE, label="Scene")
                    width_slider = gr.Slider(minimum=32, maximum=1024, value=constants.DEFAULT_OUTPUT_WIDTH,
                                             step=16, label="Width (px)")
                    height_slider = gr.Slider(minimum=32, maximum=1024, value=constants.DEFAULT_OUTPUT_HEIGHT,
                                              step=16, label="Height (px)")
                    depth_slider = gr.Slider(minimum=0, maximum=8, value=constants.RECURSION_DEPTH, step=1,
                                             label="Reflection Depth", info="0 disables mirror bounces")
                    reset_btn = gr.Button("🔄 Reset", variant="secondary")

            with gr.Column(scale=2):
                output_img = gr.Image(label="Render", interactive=False, elem_id="output_img")

        inputs = [scene_dropdown, width_slider, height_slider, depth_slider]

        def reset_view():
            return [DEFAULT_SCENE, constants.DEFAULT_OUTPUT_WIDTH,
                    constants.DEFAULT_OUTPUT_HEIGHT, constants.RECURSION_DEPTH]

        reset_btn.click(fn=reset_view, outputs=inputs)

        # Re-render on any change (resize, scene swap)
        for input_comp in inputs:
            input_comp.change(fn=render_frame, inputs=inputs, outputs=output_img,
                              trigger_mode="always_last", show_progress="hidden")

        # Initial render
        demo.load(fn=render_frame, inputs=inputs, outputs=output_img, show_progress="hidden")

    return demo

if __name__ == "__main__":
    demo = create_ui()
    demo.launch(css=CSS)
