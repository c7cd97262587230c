"""Upstream layer -- deadline-bounded access to the external quote API."""

from cotacao.upstream.fetcher import UpstreamFetcher

__all__ = ["UpstreamFetcher"]
