"""
Core risk components: feature synthesis, hotspot index, prediction,
grid aggregation and engine assembly.

Import submodules directly; this package has no eager imports.
"""
