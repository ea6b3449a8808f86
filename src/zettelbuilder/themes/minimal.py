from __future__ import annotations

"""
Minimal Theme.

Plain HTML pages with no styling beyond the browser defaults. Supports
markdown notes (with `@name` cross references), plain text, external
links and typst documents with a compiled PDF.
"""

import html
import logging
import os
import re
import shutil
from typing import List, Set
from urllib.parse import urlparse

import markdown

from zettelbuilder.core.analysis.folder_tree import sorted_folders, sorted_notes
from zettelbuilder.domain.note_models import Note, NoteFolder, NoteType
from zettelbuilder.domain.project_models import RenderContext, Theme

logger = logging.getLogger(__name__)

REF_RX = re.compile(r"@([-\w]+)")
PAREN_REF_RX = re.compile(r"\(@([-\w]+)\)")
HEADING_RX = re.compile(r"^#\s+(.+?)\s*#*\s*$", re.MULTILINE)
URL_RX = re.compile(r"https?:\S*")

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]

# -----------------------------------------------------------------------------
# PAGE LAYOUT
# -----------------------------------------------------------------------------

def _base(title: str, body: str, head: str = "") -> str:
    return (
        "<html lang=\"en\">"
        "<head>"
        "<meta charset=\"UTF-8\" />"
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\" />"
        f"<title>{html.escape(title)}</title>"
        f"{head}"
        "</head>"
        f"<body>{body}</body>"
        "</html>"
    )


def _note_link(note: Note) -> str:
    name = html.escape(note.name)
    return (
        f"<span><a href=\"{name}.html\"><code>[{name}]</code></a> "
        f"{html.escape(note.description)}</span>"
    )


def _ref_list(label: str, notes: List[Note]) -> str:
    if not notes:
        return ""
    items = "".join(f"<li>{_note_link(n)}</li>" for n in notes)
    return f"{label}:<ul>{items}</ul>"


def note_page(note: Note, context: RenderContext, content: str, head: str = "") -> str:
    """Wrap a note's rendered content with header, title and cross references."""
    name = html.escape(note.name)
    body = (
        f"<p><b><a href=\"{context.project.root_url}\">Index</a> / <span>{name}</span></b></p>"
        f"<h1>Note <code>[{name}]</code></h1>"
        f"<main>{content}</main>"
        "<h2>Cross references</h2>"
        f"{_ref_list('Outgoing', note.refs.outgoing)}"
        f"{_ref_list('Incoming', note.refs.incoming)}"
    )
    return _base(f"Notes | {note.name}", body, head)

# -----------------------------------------------------------------------------
# INDEX
# -----------------------------------------------------------------------------

def _toc_entry(note: Note) -> str:
    name = html.escape(note.name)
    parts = [f"<a href=\"{name}.html\"><code>[{name}]</code></a> <span>{html.escape(note.description)}</span>"]
    if note.refs.outgoing:
        parts.append(", links to ")
        parts.extend(f"<code>[{html.escape(n.name)}]</code>" for n in note.refs.outgoing)
    if note.refs.incoming:
        parts.append(", linked from ")
        parts.extend(f"<code>[{html.escape(n.name)}]</code>" for n in note.refs.incoming)
    return f"<li>{''.join(parts)}</li>"


def render_toc(folder: NoteFolder) -> str:
    """Nested list of a folder's notes followed by its subfolders, sorted."""
    items = [_toc_entry(note) for note in sorted_notes(folder)]
    items += [
        f"<li><strong>{html.escape(segment)}</strong>{render_toc(child)}</li>"
        for segment, child in sorted_folders(folder)
    ]
    return f"<ul>{''.join(items)}</ul>"


def render_index(context: RenderContext) -> str:
    body = (
        "<main>"
        "<h1>📑 Index</h1>"
        "<p>This is the minimal theme.</p>"
        "<h2>Notes by folder</h2>"
        f"{render_toc(context.analysis.tree)}"
        "</main>"
    )
    return _base("Index", body)

# -----------------------------------------------------------------------------
# MARKDOWN NOTES
# -----------------------------------------------------------------------------

def markdown_title(note: Note) -> str:
    match = HEADING_RX.search(note.files["md"].content)
    return match.group(1) if match else note.name


def markdown_refs(note: Note, all_names: Set[str]) -> Set[str]:
    return set(REF_RX.findall(note.files["md"].content))


def link_handles(text: str) -> str:
    """Turn `(@name)` into `(name.html)` and bare `@name` into a markdown link."""
    text = PAREN_REF_RX.sub(lambda m: f"({m.group(1)}.html)", text)
    return REF_RX.sub(lambda m: f"[{m.group(0)}]({m.group(1)}.html)", text)


def render_markdown(note: Note, context: RenderContext) -> str:
    source = link_handles(note.files["md"].content)
    content = markdown.markdown(source, extensions=MARKDOWN_EXTENSIONS)
    return note_page(note, context, f"<div class=\"markdown-body\">{content}</div>")

# -----------------------------------------------------------------------------
# PLAIN TEXT, URL AND TYPST NOTES
# -----------------------------------------------------------------------------

def render_plain_text(note: Note, context: RenderContext) -> str:
    return note_page(note, context, f"<pre>{html.escape(note.files['txt'].content)}</pre>")


def note_url(note: Note) -> str:
    """
    First http(s) URL in the note's url file.

    Raises:
        ValueError: If the file holds no URL.
    """
    match = URL_RX.search(note.files["url"].content)
    if match is None:
        raise ValueError(f"Couldn't parse URL in {note.files['url'].path}.")
    return match.group(0)


def describe_url(note: Note) -> str:
    return f"{urlparse(note_url(note)).netloc} link"


def render_url(note: Note, context: RenderContext) -> str:
    href = html.escape(note_url(note))
    content = (
        f"<p>Link to <code>{href}</code>.</p>"
        f"<iframe class=\"page\" src=\"{href}\"></iframe>"
    )
    return note_page(note, context, content)


def render_typst(note: Note, context: RenderContext) -> str:
    pdf_name = f"{note.name}.pdf"
    target = os.path.join(context.output_dir, pdf_name)
    logger.debug(f"Copying {note.files['pdf'].path} -> {target}")
    shutil.copyfile(note.files["pdf"].path, target)
    content = f"<object data=\"{html.escape(pdf_name)}\" type=\"application/pdf\"></object>"
    return note_page(note, context, content)

# -----------------------------------------------------------------------------
# THEME
# -----------------------------------------------------------------------------

MARKDOWN = NoteType(
    tag="markdown",
    extensions=frozenset({"md"}),
    description="markdown",
    title_fn=markdown_title,
    extract_refs_fn=markdown_refs,
    render_fn=render_markdown,
)

PLAIN_TEXT = NoteType(
    tag="plain text",
    extensions=frozenset({"txt"}),
    description="plain text",
    render_fn=render_plain_text,
)

EXTERNAL_URL = NoteType(
    tag="url",
    extensions=frozenset({"url"}),
    describe_fn=describe_url,
    render_fn=render_url,
)

TYPST_PDF = NoteType(
    tag="typst pdf",
    extensions=frozenset({"typ", "pdf"}),
    description="typst pdf",
    render_fn=render_typst,
)

NOTE_TYPES = (MARKDOWN, PLAIN_TEXT, EXTERNAL_URL, TYPST_PDF)

THEME = Theme(
    name="minimal",
    url_root="/",
    note_types=NOTE_TYPES,
    render_index=render_index,
)
