"""Post use cases."""

from .get_post import GetPostRequest, GetPostResponse, GetPostUseCase
from .get_recommendations import (
    GetRecommendationsRequest,
    GetRecommendationsResponse,
    GetRecommendationsUseCase,
)

__all__ = [
    "GetPostRequest",
    "GetPostResponse",
    "GetPostUseCase",
    "GetRecommendationsRequest",
    "GetRecommendationsResponse",
    "GetRecommendationsUseCase",
]
