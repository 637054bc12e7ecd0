"""
taskdesk: console client for a REST task store.

Components:
- tasks/: data models, HTTP client, task list controller
- ui/render.py: text rendering of the board
- cli/: commands, bootstrap, entrypoint
- connectors/console_connector.py: async console REPL
"""

__version__ = "0.1.0"
