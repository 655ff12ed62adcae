from .dispatcher import ExportInProgressError, ImportDispatcher, IMPORT_ERROR

__all__ = ["ExportInProgressError", "ImportDispatcher", "IMPORT_ERROR"]
