from __future__ import annotations

"""
Project Analyser.

Runs one full analysis pass over a project: discovery, assembly and
classification, the folder tree and the cross-reference graph. Each pass
produces a fresh ProjectAnalysis; nothing is carried between passes.
"""

import logging
from typing import List

from zettelbuilder.core.analysis.assembler import assemble_notes
from zettelbuilder.core.analysis.crossrefs import build_crossref_graph, link_note_refs
from zettelbuilder.core.analysis.discovery import find_note_files
from zettelbuilder.core.analysis.folder_tree import build_note_tree
from zettelbuilder.domain.note_models import Diagnostic, ProjectAnalysis
from zettelbuilder.domain.project_models import Project

logger = logging.getLogger(__name__)


def analyse_project(project: Project) -> ProjectAnalysis:
    """
    Analyse the project's source directory.

    Args:
        project: The project to analyse.

    Returns:
        ProjectAnalysis: Immutable snapshot of the pass.

    Raises:
        PathNotFound: If the source directory does not exist.
        UndefinedCrossReference: If a note references an unknown name.
    """
    diagnostics: List[Diagnostic] = []

    files = find_note_files(project.src_dir)
    notes = assemble_notes(files, project.src_dir, project.note_types, diagnostics)
    tree = build_note_tree(notes)
    refs = build_crossref_graph(notes)
    link_note_refs(notes, refs)

    if diagnostics:
        logger.info(f"Analysis finished with {len(diagnostics)} warnings")

    return ProjectAnalysis(
        files=tuple(files),
        notes=notes,
        tree=tree,
        refs=refs,
        diagnostics=tuple(diagnostics),
    )
