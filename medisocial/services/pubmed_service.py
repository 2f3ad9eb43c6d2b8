"""PubMed E-utilities search for the evidence finder."""
import httpx

from medisocial.config import settings
from medisocial.errors import SearchFailure
from medisocial.models.schemas import PubMedArticle
from medisocial.utils.logging import get_logger

logger = get_logger(__name__)

PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{uid}/"


class PubMedService:
    """esearch for the most recent ids, then esummary for their details."""

    def __init__(
        self,
        base_url: str | None = None,
        max_results: int | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.pubmed_base_url).rstrip("/")
        self.max_results = max_results or settings.pubmed_max_results
        self.timeout = timeout or settings.pubmed_timeout
        self.transport = transport

    async def search(self, query: str) -> list[PubMedArticle]:
        """Most recent articles for `query`. Any failure is logged and yields an empty list."""
        query = (query or "").strip()
        if not query:
            return []
        try:
            return await self._search(query)
        except SearchFailure as e:
            logger.warning("pubmed_search_failed", query=query, error=e.message)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("pubmed_search_failed", query=query, error=str(e))
        return []

    async def _search(self, query: str) -> list[PubMedArticle]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.get(
                f"{self.base_url}/esearch.fcgi",
                params={"db": "pubmed", "term": query, "retmode": "json", "retmax": self.max_results, "sort": "date"},
            )
            if r.status_code != 200:
                raise SearchFailure(f"esearch returned {r.status_code}")
            ids = (r.json().get("esearchresult") or {}).get("idlist") or []
            if not ids:
                return []

            r = await client.get(
                f"{self.base_url}/esummary.fcgi",
                params={"db": "pubmed", "id": ",".join(ids), "retmode": "json"},
            )
            if r.status_code != 200:
                raise SearchFailure(f"esummary returned {r.status_code}")
            summaries = r.json().get("result") or {}

        articles = []
        for uid in ids:
            item = summaries.get(uid)
            if not item:
                continue
            articles.append(
                PubMedArticle(
                    uid=str(item.get("uid", uid)),
                    title=item.get("title", ""),
                    source=item.get("source", ""),
                    pubdate=item.get("pubdate", ""),
                    authors=[a.get("name", "") for a in item.get("authors") or [] if isinstance(a, dict)],
                    volume=item.get("volume", ""),
                    url=PUBMED_ARTICLE_URL.format(uid=item.get("uid", uid)),
                )
            )
        return articles
