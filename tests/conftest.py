"""
测试公共夹具：用 Mock 代替 Playwright 的 Page / BrowserContext / Browser
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from browser_server import PageRegistry, PlaywrightBrowserManager


def make_page(html: str = "<html><body>hello</body></html>") -> MagicMock:
    """构造一个记录所有引擎调用的假页面"""
    page = MagicMock(name="page")
    page.goto = AsyncMock()
    page.content = AsyncMock(return_value=html)
    page.click = AsyncMock()
    page.type = AsyncMock()
    page.keyboard.type = AsyncMock()
    page.keyboard.press = AsyncMock()
    page.mouse.click = AsyncMock()
    page.mouse.move = AsyncMock()
    page.screenshot = AsyncMock(return_value=b"\x89PNG fake")
    page.evaluate = AsyncMock(return_value=[])
    page.accessibility.snapshot = AsyncMock(return_value=None)
    page.close = AsyncMock()
    return page


def make_context() -> MagicMock:
    context = MagicMock(name="context")
    context.new_page = AsyncMock(side_effect=lambda: make_page())
    return context


def make_browser() -> MagicMock:
    browser = MagicMock(name="browser")
    browser.is_connected = MagicMock(return_value=True)
    browser.close = AsyncMock()
    return browser


class FakeBrowserManager(PlaywrightBrowserManager):
    """start/stop 不启动真实浏览器，只挂上假对象"""

    def __init__(self, default_page=None, **kwargs):
        super().__init__(**kwargs)
        self.default_page = default_page if default_page is not None else make_page()
        self.started = False
        self.stopped = False

    async def start(self):
        self.browser = make_browser()
        self.context = make_context()
        self.registry.seed_default(self.default_page)
        self.started = True

    async def stop(self):
        self.browser = None
        self.context = None
        self.stopped = True


@pytest.fixture
def page():
    return make_page()


@pytest.fixture
def registry():
    return PageRegistry()


@pytest.fixture
def manager(page, registry):
    """已“启动”的浏览器管理器，default 绑定到 page 夹具"""
    browser_manager = PlaywrightBrowserManager(registry=registry)
    browser_manager.browser = make_browser()
    browser_manager.context = make_context()
    registry.seed_default(page)
    return browser_manager
