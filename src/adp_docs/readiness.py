"""Readiness waits for the asynchronously rendered portal pages.

The ADP portal renders its login form and document list with JavaScript,
so every browser step is gated by a bounded poll: evaluate a condition in
the page every ``poll_interval`` seconds until it holds or the wait's
timeout elapses. Each wait is additionally capped by the overall
:class:`Deadline` of the run.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable, Optional

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support.ui import WebDriverWait

from .config import DownloaderConfig
from .errors import TimedOut

logger = logging.getLogger(__name__)

VISIBILITY_SCRIPT = """
const el = document.querySelector(arguments[0]);
return el !== null &&
    (el.offsetWidth > 0 || el.offsetHeight > 0 || el.getClientRects().length > 0);
"""

PAGE_TEXT_SCRIPT = "return document.body ? document.body.innerText : '';"


class Deadline:
    """Overall deadline for the browser-driven phase of a run."""

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.seconds = seconds
        self._clock = clock
        self.started = clock()

    def elapsed(self) -> float:
        return self._clock() - self.started

    def remaining(self) -> float:
        return max(0.0, self.seconds - self.elapsed())

    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, step: str) -> None:
        """Raise :class:`TimedOut` if the deadline has passed."""
        if self.expired():
            raise TimedOut(
                step,
                self.elapsed(),
                f"overall timeout of {self.seconds:.0f}s exceeded during: {step}",
            )


class ReadinessWaiter:
    """Polls a browser session until a page condition holds.

    Args:
        browser: Object with an ``evaluate(script, *args)`` method,
                 normally a :class:`adp_docs.browser.BrowserSession`.
        config: Provides default timeout and poll interval.
        deadline: Optional overall deadline capping every wait.
    """

    def __init__(
        self,
        browser,
        config: Optional[DownloaderConfig] = None,
        deadline: Optional[Deadline] = None,
    ) -> None:
        self.browser = browser
        self.config = config or DownloaderConfig()
        self.deadline = deadline

    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> float:
        """Wait until *selector* resolves to an element with a non-empty box.

        Returns:
            Seconds waited.

        Raises:
            TimedOut: The element did not become visible in time.
        """
        logger.debug(f"[wait_for_element] Waiting for {selector}")

        def condition(browser) -> bool:
            return bool(browser.evaluate(VISIBILITY_SCRIPT, selector))

        elapsed = self._wait(condition, selector, timeout)
        logger.debug(f"[wait_for_element] Element found: {selector} ({elapsed:.1f}s)")
        return elapsed

    def wait_for_text(self, pattern: str, timeout: Optional[float] = None) -> float:
        """Wait until the rendered page text matches the regex *pattern*.

        Raises:
            ValueError: *pattern* is not a valid regular expression.
            TimedOut: The text did not appear in time.
        """
        try:
            regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regex pattern {pattern!r}: {exc}") from exc

        logger.debug(f"[wait_for_text] Waiting for text matching {pattern!r}")

        def condition(browser) -> bool:
            return regex.search(browser.evaluate(PAGE_TEXT_SCRIPT) or "") is not None

        elapsed = self._wait(condition, pattern, timeout)
        logger.debug(f"[wait_for_text] Text found: {pattern!r} ({elapsed:.1f}s)")
        return elapsed

    def settle(self, seconds: float, step: str = "settle") -> None:
        """Fixed pause for UI settling, capped by the overall deadline."""
        if self.deadline is not None:
            self.deadline.check(step)
            seconds = min(seconds, self.deadline.remaining())
        if seconds > 0:
            time.sleep(seconds)

    def _wait(self, condition: Callable[[object], bool], target: str, timeout: Optional[float]) -> float:
        if timeout is None:
            timeout = self.config.wait_timeout
        if self.deadline is not None:
            self.deadline.check(f"waiting for {target}")
            timeout = min(timeout, self.deadline.remaining())

        start = time.monotonic()
        wait = WebDriverWait(
            self.browser,
            timeout,
            poll_frequency=self.config.poll_interval,
            ignored_exceptions=(WebDriverException,),
        )
        try:
            wait.until(condition)
        except TimeoutException as exc:
            raise TimedOut(target, time.monotonic() - start) from exc
        return time.monotonic() - start
