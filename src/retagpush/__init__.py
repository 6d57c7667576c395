"""
retagpush - Retag locally built container images and push them to a registry
"""

__version__ = "0.1.0"

from .core import ImageTransferOrchestrator, run
from .errors import TransferError
from .models import RetryPolicy, RunConfig

__all__ = ["ImageTransferOrchestrator", "RetryPolicy", "RunConfig", "TransferError", "run"]
