"""Promotion workflow: graph, nodes and their shared collaborators."""
