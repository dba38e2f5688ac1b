"""Default LiteLLM prompt templates used by Prompt Organizer workflows.

Updates: v0.1.0 - 2026-09-28 - Centralise the desktop script generation template.
"""

from __future__ import annotations

DESKTOP_SCRIPT_PROMPT = (
    "Act as an expert Python Developer. "
    "Generate a complete, standalone macOS desktop application using PyQt6 and Pillow.\n\n"
    "The app is a \"Prompt Manager\" with:\n"
    "- Sidebar categories: {categories}.\n"
    "- A searchable list of prompts.\n"
    "- Fields: Title, Multi-line Text (Plain Text), Copy to Clipboard button.\n"
    "- Image handling: Drag & drop or file selection, automatic resize to max 400px width "
    "using Pillow.\n"
    "- Persistence: SQLite database (prompts.db).\n"
    "- Modern macOS dark mode aesthetic.\n\n"
    "Sample prompt data for context: {samples}\n\n"
    "Include specific instructions for installation: pip install PyQt6 Pillow\n"
    "The response must contain ONLY the code and installation instructions in a markdown "
    "code block."
)


__all__ = ["DESKTOP_SCRIPT_PROMPT"]
