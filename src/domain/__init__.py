"""Domain layer: record kinds, their field rules and the validation engine.

Nothing in this package touches storage; the infrastructure layer consumes
the normalized records it produces.
"""
