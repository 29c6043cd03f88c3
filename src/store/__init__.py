"""Chunk storage layer.

This module persists parsed game records as numbered Parquet chunks
and records per-period completion manifests.
"""
