"""Meridian: a daily diary of the AI mind.

Renders dated entries into a static site, reads them aloud through a
speech-synthesis proxy, and writes new entries with an offline job.
"""

__version__ = "0.1.0"
