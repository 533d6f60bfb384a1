"""Packaged event dataset and its loader."""
