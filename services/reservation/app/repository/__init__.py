from . import booking_repository, field_repository, review_repository

__all__ = ["booking_repository", "field_repository", "review_repository"]
