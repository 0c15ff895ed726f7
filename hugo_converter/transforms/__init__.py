"""Text transforms for Hugo Converter."""
