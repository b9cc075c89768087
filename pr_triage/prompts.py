"""Prompt rendering utilities."""

from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

TemplateContextValue = str | int | bool | list[str] | None


@lru_cache(maxsize=1)
def _prompt_environment() -> Environment:
    """Build and cache the Jinja environment for prompt templates.

    Autoescaping is limited to HTML templates; the .j2 prompts are plain text.
    """
    return Environment(
        loader=PackageLoader("pr_triage", "templates"),
        autoescape=select_autoescape(enabled_extensions=("html", "htm")),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_prompt(template_name: str, **context: TemplateContextValue) -> str:
    """Render a prompt template.

    Args:
        template_name: Template filename (e.g., "ai_review.j2")
        **context: Template variables

    Returns:
        Rendered prompt text

    """
    template = _prompt_environment().get_template(template_name)
    return template.render(**context).strip()
