"""Guided workflow engine for the Kavach portal."""
