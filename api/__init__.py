"""
Mosaic sample and file record access.
"""
