# src/env/__init__.py
"""
Configuration loading (config/coordination.yaml).
"""
