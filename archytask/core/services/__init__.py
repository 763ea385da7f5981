from __future__ import annotations

"""Outline editing services (structure edits, title editing, undo/redo).

Services are stateless apart from their collaborators; every call receives the
:class:`~archytask.core.session.OutlineSession` it works on.
"""

from .structure_editing_service import OperationResult, StructureEditingService  # noqa: F401
from .undo_service import UndoService  # noqa: F401
from .edit_session_service import EditSessionService  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "StructureEditingService",
    "UndoService",
    "EditSessionService",
]
