"""Cron-triggered production deployer for Saturn."""

__version__ = "0.1.0"
