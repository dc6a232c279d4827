"""
Datacenter Price Scraper - reads player prices from the FC Online datacenter.

For every grade and every player, opens a fresh page on
/DataCenter/PlayerInfo?spid={id}&n1Strong={grade}, waits until the price element
is populated by the page's scripts, and reads its text.

A failure on one (player, grade) pair is recorded as a failed result and never
stops the batch. Pages are scraped one at a time.
"""
from typing import Iterable, List, Optional, Sequence, Union

from playwright.sync_api import BrowserContext

from core.config import config, Config
from core.logging import get_logger, log_execution_time
from core.models.player import CatalogueEntity
from core.models.price import PriceResult, observed_result, failed_result
from services.crawler.browser import BrowserSessionManager, ResourceFilter

logger = get_logger("price-scraper")

# Resolves once the price element carries a non-empty title attribute
PRICE_READY_SCRIPT = """
(selector) => {
    const element = document.querySelector(selector);
    if (!element) return false;
    const title = element.getAttribute("title");
    return !!title && title.trim() !== "";
}
"""


def normalize_grades(grades: Union[int, Iterable[int]]) -> List[int]:
    """Accept a single grade or a sequence of grades."""
    if isinstance(grades, int):
        return [grades]
    return list(grades)


class PriceScraper:
    """
    Scrapes datacenter prices for (player, grade) pairs.

    The browser session is owned by the BrowserSessionManager passed in and is
    acquired and released inside each scrape() call.
    """

    def __init__(
        self,
        session: Optional[BrowserSessionManager] = None,
        resource_filter: Optional[ResourceFilter] = None,
        settings: Config = config,
    ):
        self.settings = settings
        self.session = session or BrowserSessionManager(settings=settings)
        self.resource_filter = resource_filter or ResourceFilter()
        self.url_template = settings.DATACENTER_URL_TEMPLATE
        self.price_selector = settings.PRICE_SELECTOR
        self.timeout_ms = settings.SCRAPE_TIMEOUT_MS

    def build_url(self, player_id: str, grade: int) -> str:
        return self.url_template.format(id=player_id, grade=grade)

    @log_execution_time(logger)
    def scrape(
        self,
        players: Sequence[CatalogueEntity],
        grades: Union[int, Iterable[int]],
    ) -> List[PriceResult]:
        """
        Scrape every player at every grade.

        Args:
            players: Candidate players (anything with an `id`)
            grades: One grade or several

        Returns:
            Results in grade-major, player-minor order, one per pair
        """
        grade_list = normalize_grades(grades)
        if not players or not grade_list:
            logger.info("Nothing to scrape", extra={"players": len(players), "grades": grade_list})
            return []

        logger.info(
            f"Scraping {len(players)} players x {len(grade_list)} grades",
            extra={"players": len(players), "grades": grade_list},
        )

        results: List[PriceResult] = []
        context: Optional[BrowserContext] = None
        try:
            browser = self.session.acquire()
            context = browser.new_context(ignore_https_errors=True)

            for grade in grade_list:
                for player in players:
                    results.append(self.scrape_one(context, str(player.id), grade))
        finally:
            if context is not None:
                try:
                    context.close()
                except Exception as e:
                    logger.warning(f"Error closing browser context: {e}")
            self.session.release()

        failed = sum(1 for result in results if result.is_failed)
        logger.info(
            f"Scraped {len(results)} prices ({failed} failed)",
            extra={"total": len(results), "failed": failed},
        )
        return results

    def scrape_one(self, context: BrowserContext, player_id: str, grade: int) -> PriceResult:
        """Scrape a single (player, grade) pair on a fresh page."""
        url = self.build_url(player_id, grade)
        page = None
        try:
            page = context.new_page()
            self.resource_filter.install(page)
            logger.debug(f"Navigating to {url}")
            page.goto(url, wait_until="domcontentloaded")
            page.wait_for_function(PRICE_READY_SCRIPT, arg=self.price_selector, timeout=self.timeout_ms)

            text = (page.text_content(self.price_selector) or "").strip()
            if not text:
                raise ValueError(f"Empty price text at {self.price_selector!r}")

            logger.info(f"ID {player_id} / Grade {grade} -> {text}")
            return observed_result(player_id, grade, text)

        except Exception as e:
            logger.error(
                f"Error for ID {player_id}, Grade {grade}: {e}",
                extra={"player_id": player_id, "grade": grade, "url": url},
            )
            return failed_result(player_id, grade, str(e))

        finally:
            if page is not None:
                try:
                    page.close()
                except Exception as e:
                    logger.warning(f"Error closing page for ID {player_id}: {e}")
