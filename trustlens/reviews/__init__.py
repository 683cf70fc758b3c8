"""Review rows and the authenticity fields written back to them."""

from trustlens.reviews.repository import ReviewRepository
from trustlens.reviews.schemas import Review

__all__ = ["Review", "ReviewRepository"]
