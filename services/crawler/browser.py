"""
Browser session management for the datacenter crawler.

- BrowserSessionManager owns at most one Playwright browser at a time
- ResourceFilter aborts requests that never carry the price text

Usage:
    with BrowserSessionManager() as browser:
        context = browser.new_context(ignore_https_errors=True)
        page = context.new_page()
        ResourceFilter().install(page)
"""
from typing import Callable, Iterable, Optional
from urllib.parse import urlparse

from playwright.sync_api import sync_playwright, Browser, Page, Playwright, Route

from core.config import config, Config
from core.logging import get_logger

logger = get_logger("browser")

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-extensions",
    "--disable-gpu",
    "--no-zygote",
]

BLOCKED_RESOURCE_TYPES = frozenset({"image", "stylesheet", "font", "media"})


# ============================================================================
# REQUEST FILTERING
# ============================================================================

class ResourceFilter:
    """
    Per-request allow/abort rule installed on a page.

    Aborts images, stylesheets, fonts and media, and anything served from a
    blocked (analytics/tracking) host or its subdomains. Documents, scripts and
    XHR/fetch always go through.
    """

    def __init__(
        self,
        blocked_domains: Optional[Iterable[str]] = None,
        blocked_types: Iterable[str] = BLOCKED_RESOURCE_TYPES,
    ):
        if blocked_domains is None:
            blocked_domains = config.blocked_domains()
        self.blocked_domains = tuple(d.lower().lstrip(".") for d in blocked_domains)
        self.blocked_types = frozenset(blocked_types)

    def is_blocked_host(self, url: str) -> bool:
        host = (urlparse(url).hostname or "").lower()
        if not host:
            return False
        return any(host == domain or host.endswith("." + domain) for domain in self.blocked_domains)

    def should_block(self, resource_type: str, url: str) -> bool:
        return resource_type in self.blocked_types or self.is_blocked_host(url)

    def handle(self, route: Route) -> None:
        request = route.request
        if self.should_block(request.resource_type, request.url):
            route.abort()
        else:
            route.continue_()

    def install(self, page: Page) -> None:
        page.route("**/*", self.handle)


# ============================================================================
# SESSION LIFECYCLE
# ============================================================================

class BrowserSessionManager:
    """
    Owns one browser session at a time.

    acquire() closes any session still open (close errors are logged, not raised)
    and launches a fresh headless Chromium. release() closes the browser and stops
    the Playwright driver; calling it twice is harmless. Used as a context manager
    so release() runs on every exit path of a batch.
    """

    def __init__(
        self,
        settings: Config = config,
        headless: bool = True,
        playwright_factory: Callable = sync_playwright,
    ):
        self.settings = settings
        self.headless = headless
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    @property
    def is_open(self) -> bool:
        return self._browser is not None

    @property
    def browser(self) -> Browser:
        if self._browser is None:
            raise RuntimeError("No browser session; call acquire() first")
        return self._browser

    def launch_options(self) -> dict:
        """Keyword arguments for chromium.launch()."""
        options = {
            "headless": self.headless,
            "args": list(LAUNCH_ARGS),
        }
        if self.settings.is_production():
            options["executable_path"] = self.settings.CHROME_EXECUTABLE_PATH
        return options

    def acquire(self) -> Browser:
        if self.is_open:
            self._close_browser()

        if self._playwright is None:
            self._playwright = self._playwright_factory().start()

        options = self.launch_options()
        try:
            self._browser = self._playwright.chromium.launch(**options)
        except Exception:
            logger.error(
                "Failed to launch browser",
                exc_info=True,
                extra={"executable_path": options.get("executable_path")},
            )
            self._stop_playwright()
            raise

        logger.info("Playwright browser initialized", extra={"headless": self.headless})
        return self._browser

    def release(self) -> None:
        self._close_browser()
        self._stop_playwright()

    def _close_browser(self) -> None:
        if self._browser is None:
            return
        browser, self._browser = self._browser, None
        try:
            browser.close()
            logger.debug("Browser closed")
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")

    def _stop_playwright(self) -> None:
        if self._playwright is None:
            return
        playwright, self._playwright = self._playwright, None
        try:
            playwright.stop()
        except Exception as e:
            logger.warning(f"Error stopping Playwright: {e}")

    def __enter__(self) -> Browser:
        return self.acquire()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
