"""
Main entry point for running the package directly.

This allows running the web UI with:
    python -m anvesh
"""

from anvesh.web_ui import main

if __name__ == "__main__":
    main()
