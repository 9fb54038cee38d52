"""Configuration and path handling for roadkit."""
