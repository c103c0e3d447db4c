from .ai_matcher import AiProductMatcher
from .config import MatchingConfig
from .normalizer import normalize_text, tokenize
from .orchestrator import BatchMatchOrchestrator
from .persister import MatchPersister
from .rebuild import IndexRebuildOrchestrator
from .schemas import MatchBatchSummary, RebuildSummary
from .scorer import ProductText, SimilarityScorer, VideoText, levenshtein_similarity
from .selector import VideoMatchSelector
from .url_matcher import ProductUrlIndex, extract_shop_urls, normalize_product_url

__all__ = [
    "AiProductMatcher",
    "BatchMatchOrchestrator",
    "IndexRebuildOrchestrator",
    "MatchBatchSummary",
    "MatchPersister",
    "MatchingConfig",
    "ProductText",
    "ProductUrlIndex",
    "RebuildSummary",
    "SimilarityScorer",
    "VideoMatchSelector",
    "VideoText",
    "extract_shop_urls",
    "levenshtein_similarity",
    "normalize_product_url",
    "normalize_text",
    "tokenize",
]
