"""
Package: config
Description: Environment-driven settings for the SQS client and poller.
"""

from queue_poller.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
