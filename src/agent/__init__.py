# src/agent/__init__.py
