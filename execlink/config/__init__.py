"""Configuration for Execlink."""
