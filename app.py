import gradio as gr

from json_field_filter.config import load_settings
from json_field_filter.handlers import (
    apply_preset_handler,
    cancel_operation_handler,
    configure,
    export_filtered_handler,
    extract_fields_handler,
    toggle_fields_handler,
)
from json_field_filter.logging_setup import init_logging

logger = init_logging()
settings = load_settings()
configure(settings)

# --- UI Definition ---
with gr.Blocks(title="JSON Field Filter") as demo:
    gr.Markdown("# JSON Field Filter")
    gr.Markdown(
        "Load a JSON document, pick the fields to hide, and get a pretty-printed copy "
        "without them. Hidden fields are removed wherever they occur, together with their values."
    )

    # State
    source_state = gr.State()
    fields_state = gr.State(value=[])

    with gr.Row():
        # Left Panel: Source & Fields
        with gr.Column(scale=1):
            gr.Markdown("### 1. Source")
            file_input = gr.File(label="Upload JSON File", file_types=[".json"])
            text_input = gr.Textbox(label="...or paste JSON", lines=6, placeholder='{"name": "Bob"}')
            with gr.Row():
                extract_btn = gr.Button("Extract Fields", variant="primary")
                cancel_btn = gr.Button("Cancel")
            status_msg = gr.Textbox(label="Status", interactive=False)

            gr.Markdown("### 2. Hide Fields")
            preset_selector = gr.Dropdown(
                label="Presets",
                choices=settings.preset_names,
                value=None,
                interactive=bool(settings.presets),
            )
            apply_preset_btn = gr.Button("Apply Preset")
            fields_checkbox = gr.CheckboxGroup(
                label="Checked fields are hidden",
                choices=[],
                value=[],
                info="Fields marked {} hold objects or arrays; the number is how often they occur.",
            )

        # Right Panel: Filtered View
        with gr.Column(scale=2):
            gr.Markdown("### 3. Filtered View")
            filtered_view = gr.Code(label="Filtered JSON", language="json", interactive=False)
            export_btn = gr.Button("Download Filtered JSON")
            download_output = gr.File(label="Download Result")

    extract_btn.click(
        fn=extract_fields_handler,
        inputs=[file_input, text_input, source_state, fields_state],
        outputs=[source_state, fields_state, fields_checkbox, status_msg, filtered_view],
    )

    # .input only fires on user edits, not when a preset rewrites the checkboxes
    fields_checkbox.input(
        fn=toggle_fields_handler,
        inputs=[fields_checkbox, source_state, fields_state],
        outputs=[fields_state, filtered_view, status_msg],
    )

    apply_preset_btn.click(
        fn=apply_preset_handler,
        inputs=[preset_selector, source_state, fields_state],
        outputs=[fields_state, fields_checkbox, filtered_view, status_msg],
    )

    cancel_btn.click(fn=cancel_operation_handler, inputs=[], outputs=[status_msg])

    export_btn.click(
        fn=export_filtered_handler,
        inputs=[filtered_view, source_state],
        outputs=[download_output, status_msg],
    )

if __name__ == "__main__":
    demo.queue().launch()
