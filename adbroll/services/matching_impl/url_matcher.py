import re
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlsplit

from adbroll.models import Product, Video

_URL_REGEX = re.compile(r"(?:https?://)?(?:[\w-]+\.)+[a-z]{2,}(?:/[^\s\"'<>]*)?", re.IGNORECASE)
_PRODUCT_PATH_REGEX = re.compile(r"/product/\d+")
_SHOP_HOST_REGEX = re.compile(r"^shop(?:-[\w]+)?\.tiktok\.com$")


def normalize_product_url(url: Optional[str]) -> str:
    """
    Canonical ``host/path`` form of a URL: lowercase, without scheme, ``www.``,
    query string, fragment or trailing slash/punctuation.
    """
    if not url:
        return ""
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"//{candidate}"
    parts = urlsplit(candidate)
    host = (parts.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    path = parts.path.rstrip("/.,;:!?)").lower()
    if not host:
        return ""
    return f"{host}{path}"


def is_shop_url(normalized_url: str) -> bool:
    """True for URLs that point at a shop product page."""
    if not normalized_url:
        return False
    host, _, path = normalized_url.partition("/")
    return bool(_PRODUCT_PATH_REGEX.search(f"/{path}") or _SHOP_HOST_REGEX.match(host))


def extract_shop_urls(text: Optional[str]) -> List[str]:
    """Normalized shop/product URLs embedded in ``text``, in order of appearance."""
    if not text:
        return []
    urls = []
    for raw in _URL_REGEX.findall(text):
        normalized = normalize_product_url(raw)
        if is_shop_url(normalized) and normalized not in urls:
            urls.append(normalized)
    return urls


class ProductUrlIndex:
    """Maps canonical product URLs to catalog products for direct matching."""

    def __init__(self, products: Iterable[Product]):
        self._by_url: Dict[str, Product] = {}
        for product in products:
            key = normalize_product_url(product.product_url)
            # Catalog order decides which product owns a duplicated URL.
            if key and key not in self._by_url:
                self._by_url[key] = product

    def __len__(self) -> int:
        return len(self._by_url)

    def lookup(self, video: Video) -> Optional[Product]:
        """Returns the product whose URL is embedded in the video's source URL or title."""
        if not self._by_url:
            return None
        for text in (video.video_url, video.title, video.product_name):
            for url in extract_shop_urls(text):
                product = self._by_url.get(url)
                if product is not None:
                    return product
        return None
