# src/monitoring/__init__.py
"""
Monitoring for the collaborative build runtime: event schema, in-process
bus, JSONL logger, emit helpers and log inspection tools.
"""
