"""Traversal and filtering engine.

This package holds the metadata accessor, the predicate set, the tree
walker and the streaming session that runs the walker on its own thread.
"""
