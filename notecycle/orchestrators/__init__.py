from .delete import DeleteOrchestrator
from .upload import UploadOrchestrator

__all__ = ["DeleteOrchestrator", "UploadOrchestrator"]
