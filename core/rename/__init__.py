"""Pattern-driven renaming: pattern compiler, sanitizer and rename application."""
