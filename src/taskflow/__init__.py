"""
taskflow: a small task tracker core.

Packages:
- tasks: task model, ordering/validation helpers, partition stores, repository
- ui: persisted UI preferences (filter, deleted panel)
- cli / connectors: interactive console front end
"""

__version__ = "0.1.0"
