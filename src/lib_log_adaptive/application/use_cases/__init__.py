"""Use cases assembling the logging pipeline from ports."""

from __future__ import annotations

from .export import create_export
from .process_record import PipelineState, create_process_record
from .shutdown import create_shutdown

__all__ = ["PipelineState", "create_export", "create_process_record", "create_shutdown"]
