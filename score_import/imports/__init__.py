from score_import.imports.collaborators import ImportCollaborators, ImportSink, InputAcquirer
from score_import.imports.orchestrator import ScoreImportOrchestrator
from score_import.imports.service import ImportService

__all__ = [
    "ImportCollaborators",
    "ImportService",
    "ImportSink",
    "InputAcquirer",
    "ScoreImportOrchestrator",
]
