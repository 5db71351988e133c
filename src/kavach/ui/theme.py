"""Rich theme for the kavach CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "dark_orange",
        "title": "bold dark_orange",
        "subtitle": "dim",
        "step": "bold dark_orange",
        "border": "grey50",
        "info": "dim",
        "warning": "red3",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "path": "cyan",
        "tier.high": "bold red3",
        "tier.medium": "yellow3",
        "tier.low": "green3",
    }
)
