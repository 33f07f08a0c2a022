import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Mapping, Optional, Union

from default_styles import DEFAULT_STYLES
from markdown_renderer import render_markdown
from title_resolver import resolve_title

# --- Logging Setup ---
app_logger = logging.getLogger('hyperpage')

Renderer = Callable[[str, Optional[Dict[str, Any]]], str]

# camelCase spellings accepted by RenderingOptions.from_dict
_OPTION_ALIASES = {
    'noDefaultStyles': 'no_default_styles',
    'beforeHeadEnd': 'before_head_end',
    'afterBodyStart': 'after_body_start',
    'beforeBodyEnd': 'before_body_end',
    'rendererOptions': 'renderer_options',
    'markedOptions': 'renderer_options',
}


class InvalidInputError(TypeError):
    """Raised when the markdown passed to assemble_page is not a string."""

    def __init__(self, message: str = "Markdown content must be a string"):
        super().__init__(message)


@dataclass
class RenderingOptions:
    """
    Page options. None means the option was not given; an empty string is
    given-but-empty and contributes nothing to the page.
    """
    title: Optional[str] = None
    css: Optional[str] = None
    no_default_styles: bool = False
    before_head_end: Optional[str] = None
    after_body_start: Optional[str] = None
    before_body_end: Optional[str] = None
    renderer_options: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]]) -> "RenderingOptions":
        """Builds options from a mapping with snake_case or camelCase keys. Unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (options or {}).items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                app_logger.debug(f"Ignoring unknown page option: {key}")
        return cls(**kwargs)


def compose_styles(css: Optional[str] = None, no_default_styles: bool = False) -> str:
    """Joins the built-in stylesheet and custom CSS by plain concatenation."""
    if no_default_styles:
        return css or ''
    if css:
        return f"{DEFAULT_STYLES}\n{css}"
    return DEFAULT_STYLES


def assemble_page(md_text: Any,
                  options: Union[RenderingOptions, Mapping[str, Any], None] = None,
                  renderer: Renderer = render_markdown) -> str:
    """
    Converts a markdown string into a complete HTML page.

    The title, custom CSS and injected fragments are inserted verbatim,
    without HTML escaping. Errors raised by the renderer propagate unchanged.
    """
    if not isinstance(md_text, str):
        raise InvalidInputError()

    if not isinstance(options, RenderingOptions):
        options = RenderingOptions.from_dict(options)

    title = resolve_title(md_text, options.title)
    html_content = renderer(md_text, options.renderer_options)

    styles = compose_styles(options.css, options.no_default_styles)
    app_logger.debug(
        f"Composing page '{title}': default styles={'off' if options.no_default_styles else 'on'}, "
        f"custom css={'yes' if options.css else 'no'}"
    )

    # --- Build the Page ---
    head_parts = [
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'<title>{title}</title>',
    ]
    if styles:
        head_parts.append(f'<style>{styles}</style>')
    head = '\n'.join(f'  {part}' for part in head_parts)
    if options.before_head_end:
        head += f'\n{options.before_head_end}'

    body = ''
    if options.after_body_start:
        body += f'{options.after_body_start}\n'
    body += f'<div class="markdown-content">\n{html_content}\n</div>'
    if options.before_body_end:
        body += f'\n{options.before_body_end}'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
{head}
</head>
<body>
{body}
</body>
</html>"""
