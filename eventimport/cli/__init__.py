"""Command line interface for the event importer.

Usage:
    python -m eventimport.cli [command] [options]

Commands:
    preview     Preview the draft extracted from a URL
    batch       Preview every URL listed in a file
    parse       Preview the draft parsed from a text file
    commit      Import a URL straight into Supabase
    summary     Print the copyable summary for a URL
"""

from eventimport.cli.main import app

__all__ = ["app"]
