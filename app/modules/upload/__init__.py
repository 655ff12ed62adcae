"""Upload controller exports."""

from .controller import (
    SelectedFile,
    UploadController,
    GenerationInProgressError,
    NothingSelectedError,
)

__all__ = [
    "SelectedFile",
    "UploadController",
    "GenerationInProgressError",
    "NothingSelectedError",
]
