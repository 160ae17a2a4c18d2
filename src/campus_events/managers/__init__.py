"""Cross-cutting managers: logging and email delivery."""
