"""
BetSage: LLM-assisted sports betting predictions.

Pulls live lines from The Odds API, asks Claude for scores, edges and
half-Kelly stakes, and serves validated results over HTTP.
"""

__version__ = "0.1.0"
