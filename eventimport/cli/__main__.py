"""Entry point for running CLI as module.

Usage:
    python -m eventimport.cli preview https://www.eventbrite.com/e/...
    python -m eventimport.cli parse details.txt --source meetup
"""

from eventimport.cli.main import main

if __name__ == "__main__":
    main()
