"""Text and HTML cycle reports."""
