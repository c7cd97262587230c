"""Quote service -- request orchestration and its HTTP surface."""

from cotacao.service.app import create_app
from cotacao.service.handler import QuoteService

__all__ = ["QuoteService", "create_app"]
