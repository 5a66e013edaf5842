"""Headless command-line runner."""
