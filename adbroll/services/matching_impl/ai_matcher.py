import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from openai import OpenAI, OpenAIError

from adbroll.models import Product, Video
from adbroll.services.exceptions import ConfigurationError

from .config import MatchingConfig

logger = logging.getLogger(__name__)

# One answer per line, e.g. "Video 3: 12" or "Video 4: ninguno".
_RESPONSE_LINE_REGEX = re.compile(r"Video\s*(\d+)\s*:\s*(\d+|ninguno)", re.IGNORECASE)
_NO_MATCH = "ninguno"

SYSTEM_PROMPT = "Eres un experto en matching de productos de TikTok Shop. Solo responde en el formato especificado."

USER_PROMPT_TEMPLATE = """Eres un sistema de matching de productos para TikTok Shop.

PRODUCTOS DISPONIBLES:
{product_list}

VIDEOS A ANALIZAR:
{video_list}

Para cada video, indica si menciona alguno de los productos de la lista.
Responde SOLO con una línea por video con el formato:
Video X: [número del producto] o "ninguno"

Ejemplo:
Video 1: 3
Video 2: ninguno

Busca coincidencias por nombre del producto o marca, características clave
o palabras relacionadas con el tipo de producto.

Responde:"""


class AiProductMatcher:
    """
    Best-effort fallback that asks a chat-completion model to pair videos the
    heuristic scorer could not place with catalog products.

    Failures never propagate: a chunk whose call fails or times out is skipped.
    """

    def __init__(
        self,
        client: Optional[Any] = None,
        model_name: Optional[str] = None,
        config: Optional[MatchingConfig] = None,
        delay: float = 0.5,
    ) -> None:
        """
        Raises:
            ConfigurationError: If no client is given and the AI gateway settings are missing.
        """
        self.config = config or MatchingConfig.from_settings()
        self.model_name = model_name or settings.AI_MATCH_MODEL
        self.delay = delay

        if client is None:
            api_key = settings.AI_GATEWAY_API_KEY
            base_url = settings.AI_GATEWAY_BASE_URL
            if not all([api_key, base_url, self.model_name]):
                raise ConfigurationError("The following settings are required: AI_GATEWAY_API_KEY, AI_GATEWAY_BASE_URL, AI_MATCH_MODEL")
            # Retries are disabled so that a slow gateway costs at most one timeout per chunk.
            client = OpenAI(base_url=base_url, api_key=api_key, timeout=settings.AI_MATCH_TIMEOUT, max_retries=0)
        self.client = client

    def match(self, videos: Sequence[Video], products: Sequence[Product]) -> Dict[int, Product]:
        """
        Returns a mapping of video id to the product the model picked.

        Only videos with a title are sent, at most ``ai_max_videos`` of them.
        """
        candidates = [video for video in videos if video.title]
        if not candidates or not products:
            return {}

        if len(candidates) > self.config.ai_max_videos:
            logger.warning(f"AI matching limited to {self.config.ai_max_videos} of {len(candidates)} unmatched videos.")
            candidates = candidates[: self.config.ai_max_videos]

        logger.info(f"Processing {len(candidates)} unmatched videos with AI...")
        product_list = self.build_product_list(products)
        matches: Dict[int, Product] = {}
        chunk_size = self.config.ai_chunk_size

        for start in range(0, len(candidates), chunk_size):
            chunk = candidates[start : start + chunk_size]
            video_list = "\n".join(f'Video {start + i + 1}: "{video.title}"' for i, video in enumerate(chunk))
            prompt = USER_PROMPT_TEMPLATE.format(product_list=product_list, video_list=video_list)

            content = self._complete(prompt)
            if content is None:
                continue

            chunk_matches = self.parse_response(content, chunk, products, start)
            for video_id, product in chunk_matches.items():
                logger.info(f"AI matched video {video_id} -> '{product.name[:40]}'")
            matches.update(chunk_matches)

            if self.delay > 0 and start + chunk_size < len(candidates):
                time.sleep(self.delay)

        return matches

    @staticmethod
    def build_product_list(products: Sequence[Product]) -> str:
        return "\n".join(f'{i + 1}. "{product.name}" (ID: {product.id})' for i, product in enumerate(products))

    @staticmethod
    def parse_response(content: str, chunk: Sequence[Video], products: Sequence[Product], start: int) -> Dict[int, Product]:
        """
        Parses ``Video N: <index|ninguno>`` lines.

        ``N`` is numbered across the whole pass, so ``start`` is the number of
        videos sent in earlier chunks. Lines that do not parse, or point outside
        the chunk or the catalog, are dropped.
        """
        matches: Dict[int, Product] = {}
        for line in content.splitlines():
            found = _RESPONSE_LINE_REGEX.search(line)
            if not found:
                continue

            video_index = int(found.group(1)) - start - 1
            answer = found.group(2).lower()
            if answer == _NO_MATCH or not 0 <= video_index < len(chunk):
                continue

            product_index = int(answer) - 1
            if 0 <= product_index < len(products):
                matches[chunk[video_index].id] = products[product_index]
        return matches

    def _complete(self, prompt: str) -> Optional[str]:
        try:
            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=1000,
            )
        except OpenAIError as e:
            logger.warning(f"AI matching call failed, skipping chunk: {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected error during AI matching, skipping chunk: {e}", exc_info=True)
            return None

        choices: List[Any] = getattr(response, "choices", None) or []
        if not choices:
            logger.warning("AI matching returned no choices, skipping chunk.")
            return None
        return choices[0].message.content or ""
