"""Bundled data files for roadkit."""
