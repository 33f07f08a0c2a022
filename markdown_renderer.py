import logging
import xml.etree.ElementTree as etree
from typing import Any, Dict, Optional

import markdown
from markdown import util
from markdown.extensions import Extension
from markdown.inlinepatterns import AUTOMAIL_RE, InlineProcessor

# --- Logging Setup ---
app_logger = logging.getLogger('hyperpage')

# Defaults applied under any caller-supplied renderer options
RENDERER_DEFAULTS: Dict[str, Any] = {
    'header_ids': False,
    'mangle': False,
    'extensions': ['fenced_code', 'tables'],
    'extension_configs': {},
    'output_format': 'html',
    'tab_length': 4,
}


class PlainAutomailInlineProcessor(InlineProcessor):
    """Renders <user@example.com> as a readable mailto link instead of entity-encoding it."""

    def handleMatch(self, m, data):
        email = self.unescape(m.group(1))
        if email.startswith('mailto:'):
            email = email[len('mailto:'):]
        el = etree.Element('a')
        el.set('href', f'mailto:{email}')
        el.text = util.AtomicString(email)
        return el, m.start(0), m.end(0)


class PlainAutomailExtension(Extension):
    """Replaces Python-Markdown's obfuscating 'automail' pattern."""

    def extendMarkdown(self, md):
        md.inlinePatterns.register(PlainAutomailInlineProcessor(AUTOMAIL_RE, md), 'automail', 110)


def build_renderer_config(options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merges caller options over RENDERER_DEFAULTS, caller keys winning."""
    config = dict(RENDERER_DEFAULTS)
    for key, value in (options or {}).items():
        if key not in RENDERER_DEFAULTS:
            app_logger.debug(f"Ignoring unknown renderer option: {key}")
            continue
        config[key] = value
    return config


def render_markdown(md_text: str, options: Optional[Dict[str, Any]] = None) -> str:
    """
    Converts markdown text to an HTML fragment with Python-Markdown.

    'header_ids' turns on the toc extension so headings carry id attributes.
    'mangle' keeps Python-Markdown's entity-encoded e-mail autolinks; when it is
    off they are rendered as plain mailto links.
    """
    config = build_renderer_config(options)

    extensions = list(config['extensions'] or [])
    if config['header_ids'] and 'toc' not in extensions:
        extensions.append('toc')
    if not config['mangle']:
        extensions.append(PlainAutomailExtension())

    md = markdown.Markdown(
        extensions=extensions,
        extension_configs=config['extension_configs'] or {},
        output_format=config['output_format'],
        tab_length=config['tab_length'],
    )
    return md.convert(md_text)
