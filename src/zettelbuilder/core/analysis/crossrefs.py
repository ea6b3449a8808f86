from __future__ import annotations

"""
Cross-Reference Graph.

Builds the directed reference graph between notes and rejects references
to names that are not part of the project.
"""

import logging
from typing import Dict, FrozenSet, Mapping, Set

from zettelbuilder.domain.errors import UndefinedCrossReference
from zettelbuilder.domain.note_models import CrossRefs, Note, NoteRefs

logger = logging.getLogger(__name__)


def build_crossref_graph(notes: Mapping[str, Note]) -> CrossRefs:
    """
    Extract references from every note and build the graph.

    Every note gets an entry in both maps, empty if it has no links. For each
    edge a -> b, b is in outgoing[a] and a is in incoming[b].

    Args:
        notes: Notes by name.

    Returns:
        CrossRefs: The reference graph.

    Raises:
        UndefinedCrossReference: On the first note (in name order) whose
                                 extractor returns a name outside the project.
    """
    names: Set[str] = set(notes)
    outgoing: Dict[str, FrozenSet[str]] = {}
    incoming: Dict[str, Set[str]] = {name: set() for name in notes}

    for name in sorted(notes):
        note = notes[name]
        refs = note.extract_refs(names)

        unknown = refs - names
        if unknown:
            raise UndefinedCrossReference(name, note.description, unknown)

        outgoing[name] = frozenset(refs)
        for target in refs:
            incoming[target].add(name)

    edges = sum(len(v) for v in outgoing.values())
    logger.debug(f"Cross-reference graph has {edges} edges between {len(notes)} notes")

    return CrossRefs(
        outgoing=outgoing,
        incoming={name: frozenset(sources) for name, sources in incoming.items()},
    )


def link_note_refs(notes: Mapping[str, Note], refs: CrossRefs) -> None:
    """
    Materialize each note's NoteRefs as sorted lists of Note objects.

    Args:
        notes: Notes by name; their refs are replaced in place.
        refs: Graph produced by build_crossref_graph.
    """
    for name, note in notes.items():
        note.refs = NoteRefs(
            outgoing=[notes[n] for n in sorted(refs.outgoing.get(name, ()))],
            incoming=[notes[n] for n in sorted(refs.incoming.get(name, ()))],
        )
