"""Reporting utilities for neuralkit."""

from .artifacts import config_hash, write_json, write_manifest
from .metrics import CsvSink, JsonlSink, checkpoint_fields
from .plots import PlotAdapter
from .summary import write_summary

__all__ = [
    "config_hash",
    "write_json",
    "write_manifest",
    "CsvSink",
    "JsonlSink",
    "checkpoint_fields",
    "PlotAdapter",
    "write_summary",
]
