"""Render a MarkdownDocument to normalized Markdown or static HTML"""

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdformat.plugins import PARSER_EXTENSIONS
from mdformat.renderer import MDRenderer

from trydocs.core.annotations import AnnotatedCodeBlock
from trydocs.core.models import PublishFormat
from trydocs.core.parse import MarkdownDocument


def _initialized(token) -> AnnotatedCodeBlock | None:
    block = token.meta.get("annotated_block")
    if block is not None and not block.initialized:
        raise RuntimeError(f"{block!r} rendered before initialization")
    return block


def _render_fence_html(self, tokens, idx, options, env) -> str:
    """Expand annotated fences into static <pre><code>; other fences use the default rule."""
    block = _initialized(tokens[idx])
    if block is None:
        return self.fence(tokens, idx, options, env)
    if block.annotations.hidden:
        return ""
    attrs = ['class="trydocs-snippet"', f'data-trydocs-order="{block.order}"']
    if block.annotations.session:
        attrs.append(f'data-trydocs-session="{escapeHtml(block.annotations.session)}"')
    if block.annotations.source_file:
        attrs.append(f'data-trydocs-source-file="{escapeHtml(block.annotations.source_file)}"')
    if block.diagnostics:
        attrs.append(f'data-trydocs-diagnostics="{escapeHtml("; ".join(block.diagnostics))}"')
    return (
        f'<pre {" ".join(attrs)}><code class="language-{escapeHtml(block.language)}">'
        f'{escapeHtml(block.source_code)}</code></pre>\n'
    )


def _html_pipeline() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    md.add_render_rule("fence", _render_fence_html)
    return md


# Token types outside CommonMark that need an mdformat parser extension to render.
EXTENSION_TOKENS = {
    "table_open": "gfm",
    "s_open": "gfm",
}


def _extensions_for(tokens: list) -> list[str]:
    """Names of the mdformat extensions needed for tokens, inline children included."""
    types = {t.type for t in tokens}
    types.update(c.type for t in tokens for c in (t.children or []))
    return sorted({EXTENSION_TOKENS[name] for name in types if name in EXTENSION_TOKENS})


def _markdown_pipeline(extensions: list[str] = ()) -> MarkdownIt:
    """MarkdownIt configured the way mdformat builds its own renderer."""
    md = MarkdownIt("commonmark", renderer_cls=MDRenderer)
    md.options["mdformat"] = {}
    md.options["store_labels"] = True
    md.options["parser_extension"] = []
    md.options["codeformatters"] = {}
    for name in extensions:
        plugin = PARSER_EXTENSIONS[name]
        md.options["parser_extension"].append(plugin)
        plugin.update_mdit(md)
    return md


def _normalize_annotations(tokens: list) -> list:
    """Copy tokens, rewriting annotated fences to canonical info strings and resolved code."""
    normalized = []
    for token in tokens:
        block = _initialized(token)
        if block is not None:
            token = token.copy(info=block.annotations.to_info_string(), content=block.source_code)
        normalized.append(token)
    return normalized


def render_markdown(document: MarkdownDocument) -> str:
    md = _markdown_pipeline(_extensions_for(document.tokens))
    return md.renderer.render(_normalize_annotations(document.tokens), md.options, dict(document.env))


def render_html(document: MarkdownDocument) -> str:
    md = _html_pipeline()
    return md.renderer.render(document.tokens, md.options, document.env)


RENDERERS = {
    PublishFormat.markdown: render_markdown,
    PublishFormat.html: render_html,
}


def render(fmt: PublishFormat, document: MarkdownDocument) -> str:
    try:
        renderer = RENDERERS[PublishFormat(fmt)]
    except ValueError as e:
        raise ValueError(f"Unsupported publish format: {fmt!r}") from e
    return renderer(document)
