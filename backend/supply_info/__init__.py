"""
Syscoin supply info service

Periodically records total and circulating supply and serves the last
known good values over HTTP.
"""

__version__ = "1.0.0"
