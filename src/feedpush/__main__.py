"""
Command-line entry point: ``python -m feedpush [config.yaml]``.

See feedpush.cli for options and exit codes.
"""

from feedpush.cli import app


if __name__ == "__main__":
    app(prog_name="feedpush")
