from __future__ import annotations

"""
Note Domain Data Models.

Defines the value types produced by one analysis pass: lazily read note
files, note type descriptors (capability bundles selected by extension
set), notes, the folder tree and the cross-reference graph.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

from zettelbuilder.domain.errors import NoteReadError

if TYPE_CHECKING:
    from zettelbuilder.domain.project_models import RenderContext

logger = logging.getLogger(__name__)

Markup = Union[str, Awaitable[str]]
TitleFn = Callable[["Note"], str]
DescribeFn = Callable[["Note"], str]
ExtractRefsFn = Callable[["Note", Set[str]], Set[str]]
RenderFn = Callable[["Note", "RenderContext"], Markup]

# -----------------------------------------------------------------------------
# LAZY FILE CONTENT
# -----------------------------------------------------------------------------

_UNREAD: Any = object()


class LazyFile:
    """
    A text file whose content is read on first access and then memoized.

    The cell has two states, unread and read. Once read, the cached content
    is returned for the rest of the process; the file is never read twice.
    """

    __slots__ = ("path", "_content")

    def __init__(self, path: str) -> None:
        self.path = path
        self._content: Any = _UNREAD

    @property
    def is_read(self) -> bool:
        return self._content is not _UNREAD

    @property
    def content(self) -> str:
        """
        Full UTF-8 text of the file.

        Raises:
            NoteReadError: The file is unreadable or not valid UTF-8.
        """
        if self._content is _UNREAD:
            logger.debug(f"Reading {self.path}")
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    self._content = f.read()
            except (OSError, UnicodeDecodeError) as e:
                raise NoteReadError(self.path, str(e)) from e
        return self._content

    def __repr__(self) -> str:
        state = "read" if self.is_read else "unread"
        return f"LazyFile({self.path!r}, {state})"

# -----------------------------------------------------------------------------
# DEFAULT CAPABILITIES
# -----------------------------------------------------------------------------

def default_title(note: Note) -> str:
    """Fall back to the note's name as its title."""
    return note.name


def no_refs(note: Note, all_names: Set[str]) -> Set[str]:
    """Notes without a reference syntax reference nothing."""
    return set()


def default_render(note: Note, context: RenderContext) -> str:
    """
    Render a diagnostic page for notes whose type has no renderer.

    Logs a warning so that unclassified notes stand out during builds.
    """
    logger.warning(f"Default renderer used for {note.description} note \"{note.name}\"")
    files = "\n".join(f"{ext}: {f.path}" for ext, f in sorted(note.files.items()))
    return (
        "<main>"
        "This page was generated by the default note renderer."
        f"<pre>{html.escape(repr(note))}\n{html.escape(files)}</pre>"
        "</main>"
    )

# -----------------------------------------------------------------------------
# NOTE TYPE DESCRIPTORS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NoteType:
    """
    Immutable descriptor binding an extension combination to note behavior.

    Attributes:
        tag: Classification tag, unique within a theme.
        extensions: Exact set of file extensions (without dot) the type needs.
        description: Human label shown in indexes; None derives it from files.
        describe_fn: Derives the label from a note, overriding description.
        title_fn: Derives a note's display title.
        extract_refs_fn: Returns the names referenced by a note.
        render_fn: Renders a note page as markup (may be async).
    """
    tag: str
    extensions: FrozenSet[str]
    description: Optional[str] = None
    describe_fn: Optional[DescribeFn] = None
    title_fn: TitleFn = default_title
    extract_refs_fn: ExtractRefsFn = no_refs
    render_fn: RenderFn = default_render

    def matches(self, extensions: Set[str]) -> bool:
        """Exact set equality: the symmetric difference must be empty."""
        return not (self.extensions ^ frozenset(extensions))


UNCLASSIFIED = NoteType(tag="unclassified", extensions=frozenset())

# -----------------------------------------------------------------------------
# NOTES
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class NoteRefs:
    """Resolved cross references of a note, sorted by name."""
    outgoing: List[Note] = field(default_factory=list)
    incoming: List[Note] = field(default_factory=list)


@dataclass(eq=False)
class Note:
    """
    One logical content unit, possibly backed by several files.

    Attributes:
        name: Unique identifier; also the page permalink.
        dir: Directory segments relative to the source root.
        files: Note files keyed by extension.
        note_type: Capability bundle selected from the note's extensions.
        refs: Cross references, materialized once per analysis pass.
    """
    name: str
    dir: Tuple[str, ...]
    files: Dict[str, LazyFile]
    note_type: NoteType = UNCLASSIFIED
    refs: NoteRefs = field(default_factory=NoteRefs, repr=False)
    _title: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def tag(self) -> str:
        return self.note_type.tag

    @property
    def is_classified(self) -> bool:
        return self.note_type is not UNCLASSIFIED

    @property
    def title(self) -> str:
        if self._title is None:
            self._title = self.note_type.title_fn(self)
        return self._title

    @property
    def description(self) -> str:
        if self.note_type.describe_fn is not None:
            return self.note_type.describe_fn(self)
        if self.note_type.description is not None:
            return self.note_type.description
        return ", ".join(sorted(self.files))

    def extract_refs(self, all_names: Set[str]) -> Set[str]:
        return set(self.note_type.extract_refs_fn(self, all_names))

    def render(self, context: RenderContext) -> Markup:
        return self.note_type.render_fn(self, context)

# -----------------------------------------------------------------------------
# FOLDER TREE AND CROSS-REFERENCE GRAPH
# -----------------------------------------------------------------------------

@dataclass
class NoteFolder:
    """
    Recursive folder node grouping notes by source directory.

    Attributes:
        notes: Notes stored directly in this folder, by name.
        folders: Child folders, by directory segment.
    """
    notes: Dict[str, Note] = field(default_factory=dict)
    folders: Dict[str, NoteFolder] = field(default_factory=dict)


@dataclass(frozen=True)
class CrossRefs:
    """
    Directed reference graph between notes, by name.

    Attributes:
        outgoing: Names each note links to.
        incoming: Names linking to each note.
    """
    outgoing: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    incoming: Mapping[str, FrozenSet[str]] = field(default_factory=dict)


Diagnostic = Any


@dataclass(frozen=True)
class ProjectAnalysis:
    """
    Immutable snapshot of one analysis pass.

    Attributes:
        files: Discovered note file paths.
        notes: Notes by name.
        tree: Notes grouped by folder.
        refs: Cross-reference graph.
        diagnostics: Non-fatal conditions found during the pass.
    """
    files: Tuple[str, ...] = ()
    notes: Mapping[str, Note] = field(default_factory=dict)
    tree: NoteFolder = field(default_factory=NoteFolder)
    refs: CrossRefs = field(default_factory=CrossRefs)
    diagnostics: Tuple[Diagnostic, ...] = ()
