"""
Convenience entry point for running staffscheduler as a module.

Usage: python -m staffscheduler [command] [options]
"""

from staffscheduler.cli.app import app

if __name__ == "__main__":
    app()
