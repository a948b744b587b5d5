"""Application layer: use-case orchestration over the domain and the store."""

from .portfolio import PortfolioService

__all__ = ["PortfolioService"]
