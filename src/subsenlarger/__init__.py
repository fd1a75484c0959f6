from __future__ import annotations

from .config import SubsEnlargerConfig
from .pipeline import FileResult, SubsEnlargerPipeline

__all__ = ["SubsEnlargerConfig", "SubsEnlargerPipeline", "FileResult"]

__version__ = "0.1.0"
