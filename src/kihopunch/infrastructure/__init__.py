"""Infrastructure layer — the Kiho HTTP API.

The only layer allowed to perform network I/O.
"""
