"""
File records of a sample: models, location rules and comparison.
"""
