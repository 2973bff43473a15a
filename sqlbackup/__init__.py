"""
==========================
Main Application Module
==========================

This module provides the main entry point for the backup runner.
It runs one backup pass by calling the `start_app` function.

Usage:
>>> from sqlbackup import start_app
>>> start_app()
"""
from sqlbackup.app import start_app, run_backup

__version__ = "1.0.0"
