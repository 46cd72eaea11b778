"""Command-line jobs, run with `python -m pixelpack.jobs.<name>`."""
