"""Discorder - GitHub to Discord webhook relay"""
__version__ = "0.1.0"
