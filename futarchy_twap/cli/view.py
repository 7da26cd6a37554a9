import json
import sys


class View:
    """Handles all console output: results to stdout, errors to stderr."""

    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def display_result(self, result: dict):
        """Prints a result dict as indented JSON."""
        print(json.dumps(result, indent=2), file=self.stdout)

    def display_error(self, message: str):
        print(f"Error: {message}", file=self.stderr)
