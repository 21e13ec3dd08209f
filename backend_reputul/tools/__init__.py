"""Command-line tools (run with python -m backend_reputul.tools.<name>)."""
