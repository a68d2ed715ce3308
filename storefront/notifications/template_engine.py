"""
Minimal Handlebars-style rendering for the HTML email templates.

Supported syntax:
    {{name}}                          variable (HTML-escaped)
    {{#if name}}...{{/if}}            kept when name is truthy
    {{#each items}}...{{/each}}       repeated per item; item keys shadow
                                      the outer variables

Blocks do not nest inside blocks of the same kind.
"""

import re
import uuid
from typing import Any, Dict, List, Mapping, Optional

from markupsafe import escape

VARIABLE_RE = re.compile(r"\{\{(\w+)\}\}")
IF_BLOCK_RE = re.compile(r"\{\{#if (\w+)\}\}([\s\S]*?)\{\{/if\}\}")
EACH_BLOCK_RE = re.compile(r"\{\{#each (\w+)\}\}([\s\S]*?)\{\{/each\}\}")


def _is_truthy(value: Any) -> bool:
    return value is not None and value is not False and value != "" and value != []


def _format(value: Any) -> str:
    if value is None or value is False:
        return ""
    return str(escape(value))


def render_conditionals(html: str, context: Mapping[str, Any]) -> str:
    return IF_BLOCK_RE.sub(
        lambda m: m.group(2) if _is_truthy(context.get(m.group(1))) else "",
        html
    )


def render_variables(html: str, context: Mapping[str, Any]) -> str:
    return VARIABLE_RE.sub(lambda m: _format(context.get(m.group(1))), html)


def render_loops(html: str, context: Mapping[str, Any], rendered_blocks: Optional[List[str]] = None,
                 marker: str = "") -> str:
    """
    Expand each blocks.

    With rendered_blocks, every expansion is appended there and replaced by
    a marker so the caller can render the rest of the page without
    re-reading loop output.
    """
    def expand(match):
        items = context.get(match.group(1))
        if not isinstance(items, (list, tuple)):
            return ""

        body = match.group(2)
        rendered = []
        for item in items:
            scope: Dict[str, Any] = {
                k: v for k, v in context.items() if k != match.group(1)
            }
            if isinstance(item, Mapping):
                scope.update(item)
            else:
                scope["this"] = item
            # conditionals first so their bodies see item variables
            rendered.append(render_variables(render_conditionals(body, scope), scope))
        output = "".join(rendered)
        if rendered_blocks is None:
            return output
        rendered_blocks.append(output)
        return f"{marker}{len(rendered_blocks) - 1}{marker}"

    return EACH_BLOCK_RE.sub(expand, html)


def render_template(html: str, variables: Optional[Mapping[str, Any]] = None) -> str:
    """
    Render template text against variables.

    Missing or empty variables render as an empty string.
    """
    context = dict(variables or {})
    blocks: List[str] = []
    marker = f"\x00{uuid.uuid4().hex}\x00"

    html = render_loops(html, context, blocks, marker)
    html = render_conditionals(html, context)
    html = render_variables(html, context)
    return re.sub(
        re.escape(marker) + r"(\d+)" + re.escape(marker),
        lambda m: blocks[int(m.group(1))],
        html
    )
