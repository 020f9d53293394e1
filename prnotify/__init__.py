"""prnotify: push notifications for pull request activity."""

__version__ = "0.1.0"
