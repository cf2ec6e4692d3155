"""School export ingestion pipeline.

This module reads export containers, decodes and parses their documents,
and hands canonical records to the store layer.
"""
