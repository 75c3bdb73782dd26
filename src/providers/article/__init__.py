"""Article providers.

    - WebScraperProvider -- downloads a news page with httpx and rebuilds its
      headings, paragraphs and list items as markdown with BeautifulSoup.
    - CSVArticleSource   -- reads the ``Source,URL`` article list that seeds
      ingestion.
"""

from src.providers.article.csv_article_source import CSVArticleSource
from src.providers.article.web_scraper_provider import WebScraperProvider

__all__ = ["CSVArticleSource", "WebScraperProvider"]
