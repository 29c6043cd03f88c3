"""Archive ingestion pipeline.

This module fetches, decompresses, and parses monthly game archives.
It runs one resumable pipeline per period and orchestrates the fleet.
"""
