"""Data models for Last.fm Jam Sync."""

from .result import ImportOutcome, SyncSummary, TrackResult
from .track import LovedTrack, TrackDetails

__all__ = ["ImportOutcome", "LovedTrack", "SyncSummary", "TrackDetails", "TrackResult"]
