import pytest

from archytask.core.services.edit_session_service import EditSessionService
from archytask.core.services.structure_editing_service import StructureEditingService
from archytask.core.services.undo_service import UndoService


@pytest.fixture
def structure_editing_service():
    return StructureEditingService()


@pytest.fixture
def edit_session_service(structure_editing_service):
    return EditSessionService(structure_editing_service)


@pytest.fixture
def undo_service():
    return UndoService(max_history=50)
