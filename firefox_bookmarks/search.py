"""Search engine module for bookmarks."""
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from firefox_bookmarks.bookmarks_reader import Bookmark


@dataclass(frozen=True)
class SearchResult:
    """A ranked bookmark."""
    title: str
    url: str
    score: int


class SearchEngine(Protocol):
    """Protocol for search engines to allow extensibility."""

    def rank(
        self,
        bookmarks: Sequence[Bookmark],
        terms: Sequence[str],
        limit: Optional[int] = None,
    ) -> List[SearchResult]:
        """Rank bookmarks against query terms.

        Args:
            bookmarks: Bookmarks to search
            terms: Query terms
            limit: Maximum number of results to return, None for all

        Returns:
            Matching bookmarks, most relevant first
        """
        ...


class KeywordSearchEngine:
    """Substring scoring over titles and URLs.

    Each term scores +2 when found in the title, +1 more when the title
    starts with it, and +1 when found in the URL. Matching is
    case-insensitive.
    """

    def _normalize_terms(self, terms: Sequence[str]) -> List[str]:
        return [term.lower() for term in terms if term]

    def _score_bookmark(self, terms: List[str], bookmark: Bookmark) -> int:
        """Score a bookmark against lowercase terms.

        Args:
            terms: Lowercase query terms
            bookmark: Bookmark to score

        Returns:
            Total score over all terms
        """
        title = bookmark.title.lower()
        url = bookmark.url.lower()
        score = 0

        for term in terms:
            if term in url:
                score += 1
            index = title.find(term)
            if index > -1:
                score += 2
            if index == 0:
                score += 1

        return score

    @staticmethod
    def _sort_key(result: SearchResult) -> Tuple[int, str]:
        # Descending score, then title in codepoint order
        return (-result.score, result.title)

    def rank(
        self,
        bookmarks: Sequence[Bookmark],
        terms: Sequence[str],
        limit: Optional[int] = None,
    ) -> List[SearchResult]:
        """Rank bookmarks using substring scoring.

        Args:
            bookmarks: Bookmarks to search
            terms: Query terms
            limit: Maximum number of results to return, None for all

        Returns:
            Bookmarks scoring at least 1, highest score first
        """
        query_terms = self._normalize_terms(terms)
        if not query_terms or not bookmarks:
            return []

        results = []
        for bookmark in bookmarks:
            score = self._score_bookmark(query_terms, bookmark)
            if score > 0:
                results.append(SearchResult(title=bookmark.title, url=bookmark.url, score=score))

        results.sort(key=self._sort_key)

        if limit is not None:
            return results[:limit]
        return results
