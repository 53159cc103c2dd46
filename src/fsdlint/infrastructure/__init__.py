"""Infrastructure layer — filesystem, glob matching, import extraction.

This layer depends on stdlib and third-party libs (wcmatch).
It must never import from services, commands, or output.
"""
