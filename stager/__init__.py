"""Stage application source trees into runnable droplets."""

from .errors import StagingError
from .models import StagedDroplet, StagingRequest
from .orchestrator import Stager

__all__ = ["StagedDroplet", "Stager", "StagingError", "StagingRequest"]
