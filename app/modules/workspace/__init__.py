from .state import GenerationOutcome, Workspace, WorkspaceManager, workspace_manager

__all__ = [
    "GenerationOutcome",
    "Workspace",
    "WorkspaceManager",
    "workspace_manager",
]
