# Path: core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates the gallery engine, domain models, and the error hierarchy.
