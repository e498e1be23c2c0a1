"""Template rendering for manifest bodies."""

from cluster_installer.render.renderer import (
    TectonicTemplateData,
    TemplateError,
    apply_template_data,
    render_template,
    template_keys,
)

__all__ = [
    "TectonicTemplateData",
    "TemplateError",
    "apply_template_data",
    "render_template",
    "template_keys",
]
