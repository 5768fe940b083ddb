"""
Browser launch configuration.

Everything a session needs is held in one immutable ``BrowserConfig`` value
that is handed to a session factory; nothing is registered process-wide.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from config import BrowserSettings, get_settings


# Chromium flags that drop the most obvious automation fingerprints and
# background chatter
BROWSER_ARGS: Tuple[str, ...] = (
    "--no-sandbox",  # CI runners disable unprivileged user namespaces
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-features=IsolateOrigins,site-per-process",
    "--disable-infobars",
    "--disable-notifications",
    "--disable-popup-blocking",
    "--disable-default-apps",
    "--disable-extensions",
    "--disable-translate",
    "--disable-sync",
    "--disable-background-networking",
    "--disable-client-side-phishing-detection",
    "--disable-component-update",
    "--disable-hang-monitor",
    "--disable-prompt-on-repost",
    "--disable-domain-reliability",
    "--disable-renderer-backgrounding",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-breakpad",
    "--disable-component-extensions-with-background-pages",
    "--disable-ipc-flooding-protection",
    "--disable-back-forward-cache",
    "--disable-partial-raster",
    "--disable-skia-runtime-opts",
    "--disable-smooth-scrolling",
    "--disable-features=site-per-process,TranslateUI,BlinkGenPropertyTrees",
    "--enable-features=NetworkService,NetworkServiceInProcess",
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

# Runs before any page script: hide the usual headless giveaways
STEALTH_INIT_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
window.chrome = window.chrome || { runtime: {} };
const originalQuery = window.navigator.permissions && window.navigator.permissions.query;
if (originalQuery) {
  window.navigator.permissions.query = (parameters) =>
    parameters.name === 'notifications'
      ? Promise.resolve({ state: Notification.permission })
      : originalQuery(parameters);
}
"""

# Ad, tracker and consent-manager hosts; requests to these (and subdomains) are aborted
BLOCKED_HOSTS: Tuple[str, ...] = (
    "doubleclick.net",
    "googlesyndication.com",
    "googleadservices.com",
    "google-analytics.com",
    "googletagmanager.com",
    "googletagservices.com",
    "adservice.google.com",
    "amazon-adsystem.com",
    "adnxs.com",
    "adsrvr.org",
    "criteo.com",
    "criteo.net",
    "taboola.com",
    "outbrain.com",
    "scorecardresearch.com",
    "quantserve.com",
    "moatads.com",
    "rubiconproject.com",
    "pubmatic.com",
    "openx.net",
    "casalemedia.com",
    "hotjar.com",
    "segment.io",
    "chartbeat.com",
    "connect.facebook.net",
    "ads-twitter.com",
    "cookielaw.org",
    "onetrust.com",
    "cookiebot.com",
    "consensu.org",
    "quantcast.com",
    "usercentrics.eu",
    "privacy-mgmt.com",
    "trustarc.com",
)

# Consent popups, paywall gates and empty ad slots the host block-list misses
HIDE_ELEMENTS_CSS = """
  /* X/Twitter */
  [data-testid="BottomBar"],
  [data-testid="sidebarColumn"],
  [data-testid="sheetDialog"],

  /* Common consent platforms */
  #onetrust-consent-sdk,
  #onetrust-banner-sdk,
  .qc-cmp2-container,
  #CybotCookiebotDialog,
  .truste_overlay,
  .truste_box_overlay,
  .osano-cm-window,
  #didomi-host,
  .cc-window,
  #sp_message_container,
  [class^="cky-"],
  [class*=" cky-"],
  [id^="cky-"],
  #usercentrics-root,
  [class^="uc-"],
  [class*=" uc-"],
  [class^="termly-"],
  [id^="termly-"],
  #iubenda-cs-banner,
  [class^="iubenda-"],
  .klaro,
  #klaro,
  [class^="cmplz-"],
  [id^="cmplz-"],
  #cookie-notice,
  [class^="cookie-notice"],
  .BorlabsCookie,
  #BorlabsCookieBox,
  [id^="axeptio_"],
  [class^="axeptio-"],
  [id^="cookiescript_"],
  [class^="cookiescript_"],
  #cmpbox,
  [class^="cmpbox"],
  [class^="evidon-"],
  [id^="evidon-"],
  [class^="gdpr-"],
  [id^="gdpr-"],
  modality-custom-element,
  [id^="modality-"],
  [class*="cookie-banner"],
  [class*="cookie-consent"],
  [id*="cookie-banner"],
  [id*="cookie-consent"],

  /* Modal dialogs and their overlay parents */
  [role="dialog"][aria-modal="true"],
  div[aria-hidden="true"]:has([role="dialog"]),

  /* Login / registration walls */
  #gateway-content,
  [data-testid="inline-message"],
  [class*="gate-"],
  [class*="Gateway"],
  [data-testid="paywall"],
  [data-testid="registration-wall"],
  [class*="Backdrop"],
  [class*="Overlay"]:has([role="dialog"]),
  [class*="gradient" i],
  [class*="truncate-content" i],

  /* Newsletter popups */
  [data-testid="newsletter-popup"],
  .newsletter-popup,
  .subscribe-popup,

  /* Ad placeholders */
  [class*="ad-container"],
  [class*="ad-slot"],
  [class*="ad-wrapper"],
  [class*="ad-banner"],
  [class*="advert-"],
  [id*="google_ads"],
  [id*="div-gpt-ad"],
  .adsbygoogle,
  .dfp-leaderboard-container,
  [id^="bordeaux-"] {
    display: none !important;
  }
"""

# Collapses empty ad placeholders and hides paywall gradient overlays
CLEANUP_SCRIPT = """
() => {
  for (const el of document.querySelectorAll('*')) {
    const tagName = el.tagName.toLowerCase();
    if (tagName.startsWith('uc-')) {
      el.style.display = 'none';
      continue;
    }
    const style = window.getComputedStyle(el);
    const bg = style.backgroundImage || '';
    const isOverlay = style.position === 'fixed' || style.position === 'absolute';
    if (bg.includes('linear-gradient') && isOverlay) {
      el.style.display = 'none';
      continue;
    }
    if (tagName === 'div') {
      const minH = parseInt(style.minHeight) || 0;
      const text = (el.textContent || '').trim();
      if (minH > 100 && text.length < 50) {
        el.style.minHeight = '0';
        el.style.height = 'auto';
      }
    }
  }
}
"""

BODY_TEXT_SCRIPT = "() => (document.body && document.body.innerText) || ''"


@dataclass(frozen=True)
class BrowserConfig:
    """Immutable launch + navigation configuration for one browser session."""

    headless: bool = True
    launch_args: Tuple[str, ...] = BROWSER_ARGS
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1920
    viewport_height: int = 1080
    device_scale_factor: float = 3
    navigation_timeout_ms: int = 15000
    dom_ready_timeout_ms: int = 30000
    settle_delay_ms: int = 2000
    article_wait_ms: int = 5000
    min_text_length: int = 200
    block_trackers: bool = True
    blocked_hosts: Tuple[str, ...] = BLOCKED_HOSTS
    hide_css: str = field(default=HIDE_ELEMENTS_CSS, repr=False)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[BrowserSettings] = None,
        *,
        min_text_length: Optional[int] = None,
    ) -> "BrowserConfig":
        root = get_settings()
        settings = settings or root.browser
        return cls(
            headless=settings.headless,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
            device_scale_factor=settings.device_scale_factor,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            dom_ready_timeout_ms=settings.dom_ready_timeout_ms,
            settle_delay_ms=settings.settle_delay_ms,
            article_wait_ms=settings.article_wait_ms,
            min_text_length=min_text_length if min_text_length is not None else root.extraction.min_text_length,
        )

    def is_blocked_host(self, hostname: str) -> bool:
        host = (hostname or "").lower()
        return any(host == blocked or host.endswith("." + blocked) for blocked in self.blocked_hosts)
