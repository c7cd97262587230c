"""Deadline-bounded currency quote relay.

Client -> local service (300ms) -> upstream quote API (200ms), with an
optional SQLite upsert (10ms) on the service side.
"""

__version__ = "0.1.0"
