"""Async client for the Tathya API with a locally reconciled feed cache."""
from tathya.client.api import TathyaClient
from tathya.client.session import SessionStore
from tathya.client.state import FeedState, FeedStatus

__all__ = ["TathyaClient", "SessionStore", "FeedState", "FeedStatus"]
