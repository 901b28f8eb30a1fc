"""Distributable hidden-mapping seeds."""
