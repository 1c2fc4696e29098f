"""Batched external sinks and the manager dispatching to them."""

from __future__ import annotations

from ._batching import BatchingTransport
from .file import FileTransport
from .http import HttpTransport
from .manager import TransportManager

__all__ = ["BatchingTransport", "FileTransport", "HttpTransport", "TransportManager"]
