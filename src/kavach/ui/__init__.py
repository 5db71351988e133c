"""Console and TUI presentation for Kavach."""
