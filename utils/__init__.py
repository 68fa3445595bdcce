"""Helpers shared by the command-line interface."""
