"""
A library for computing container image names and assembling and publishing
Helm charts.
"""

__all__ = [
    "chart",
    "credentials",
    "exceptions",
    "helm",
    "image",
    "manifest",
    "project",
    "upload",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
