"""
DOMAIN LAYER - Model selection types and error kinds.

Pure Python, no framework or provider SDK dependencies.
"""
