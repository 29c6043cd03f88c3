"""Game header parsing.

This module turns raw PGN game blocks into typed game records.
It owns the header vocabularies and the archive-wide block parser.
"""
