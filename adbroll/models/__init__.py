from .match_job import MatchJob
from .product import Creator, Product
from .video import Video

__all__ = [
    "Creator",
    "MatchJob",
    "Product",
    "Video",
]
