"""
Playwright 浏览器管理器核心类
包含浏览器生命周期与所有页面操作方法
"""
import base64
import logging
from typing import Any, Dict, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from .config import (
    BROWSER_TYPE,
    DEFAULT_PAGE_ID,
    ELEMENT_INDEX_ATTRIBUTE,
    HEADLESS,
    SUPPORTED_BROWSERS,
    TYPING_DELAY_MS,
)
from .models import (
    CLICK_ERROR,
    INPUT_TEXT_ERROR,
    MOVE_MOUSE_ERROR,
    NAVIGATE_ERROR,
    NO_SNAPSHOT,
    PAGE_ALREADY_EXISTS,
    SCREENSHOT_ERROR,
    TYPE_TEXT_ERROR,
    BrowserLaunchError,
    Click,
    CreatePage,
    GetHtml,
    GetInteractiveElements,
    GetScreenshot,
    InputText,
    MoveMouse,
    Navigate,
    Observe,
    PageAlreadyExistsError,
    TypeText,
    error_payload,
)
from .page_registry import PageRegistry
from .snapshot import INTERACTIVE_ELEMENTS_SCRIPT, flatten_snapshot, interactive_selector

logger = logging.getLogger(__name__)


class PlaywrightBrowserManager:
    """Playwright 浏览器管理器（整个进程共享一个浏览器实例）"""

    def __init__(
        self,
        browser_type: str = BROWSER_TYPE,
        headless: bool = HEADLESS,
        registry: Optional[PageRegistry] = None,
    ):
        self.browser_type = browser_type
        self.headless = headless
        self.registry = registry if registry is not None else PageRegistry()
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None

    @property
    def is_running(self) -> bool:
        return self.browser is not None and self.browser.is_connected()

    async def start(self):
        """启动浏览器并绑定默认页面，失败时抛出 BrowserLaunchError"""
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise BrowserLaunchError(f"Unsupported browser: {self.browser_type}")

        try:
            if self.playwright is None:
                self.playwright = await async_playwright().start()
            launcher = getattr(self.playwright, self.browser_type)
            self.browser = await launcher.launch(headless=self.headless)
            self.context = await self.browser.new_context()
            page = await self.context.new_page()
        except Exception as e:
            logger.error(f"浏览器启动失败: {e}", exc_info=True)
            await self.stop()
            raise BrowserLaunchError(f"Failed to launch {self.browser_type}: {e}") from e

        self.registry.seed_default(page)
        logger.info(f"浏览器已启动: {self.browser_type} (headless={self.headless})，默认页面: {DEFAULT_PAGE_ID}")

    async def stop(self):
        """关闭浏览器并停止 Playwright"""
        if self.browser is not None:
            try:
                await self.browser.close()
            except Exception as e:
                logger.warning(f"关闭浏览器出错: {e}")
            self.browser = None
            self.context = None
        if self.playwright is not None:
            await self.playwright.stop()
            self.playwright = None
            logger.info("Playwright 已停止")

    # 页面管理
    async def create_page(self, request: CreatePage) -> Optional[Dict[str, Any]]:
        """创建新页面并绑定到 pageId，已存在时返回错误"""
        if request.page_id in self.registry:
            return error_payload(PAGE_ALREADY_EXISTS)

        page = await self.context.new_page()
        try:
            self.registry.register(request.page_id, page)
        except PageAlreadyExistsError:
            # 等待 new_page 期间其他连接已抢先注册同名页面
            logger.warning(f"页面 {request.page_id} 已被并发创建，关闭多余页面")
            await page.close()
            return error_payload(PAGE_ALREADY_EXISTS)
        return None

    # 导航操作
    async def navigate(self, page: Page, request: Navigate) -> Dict[str, Any]:
        """导航到指定 URL 并返回导航后的 HTML"""
        try:
            await page.goto(request.url)
            html = await page.content()
            return {"html": html}
        except Exception as e:
            logger.error(f"导航失败 ({request.page_id} -> {request.url}): {e}", exc_info=True)
            return error_payload(NAVIGATE_ERROR)

    async def get_html(self, page: Page, request: GetHtml) -> str:
        """返回当前页面 HTML（异常不在此处理）"""
        return await page.content()

    # 页面交互
    async def click(self, page: Page, request: Click) -> Dict[str, Any]:
        """点击选择器匹配的元素"""
        try:
            await page.click(request.selector)
            return {"success": True}
        except Exception as e:
            logger.error(f"点击失败 ({request.page_id}, {request.selector}): {e}", exc_info=True)
            return error_payload(CLICK_ERROR)

    async def input_text(self, page: Page, request: InputText) -> Optional[Dict[str, Any]]:
        """在元素中逐字符输入文本，enter 为真时再按 Enter"""
        try:
            await page.type(request.selector, request.text, delay=TYPING_DELAY_MS)
            if request.enter:
                await page.keyboard.press("Enter")
        except Exception as e:
            logger.error(f"输入失败 ({request.page_id}, {request.selector}): {e}", exc_info=True)
            return error_payload(INPUT_TEXT_ERROR)
        return None

    async def type_text(self, page: Page, request: TypeText) -> Optional[Dict[str, Any]]:
        """向当前焦点元素输入文本"""
        try:
            await page.keyboard.type(request.text)
            if request.enter:
                await page.keyboard.press("Enter")
        except Exception as e:
            logger.error(f"键盘输入失败 ({request.page_id}): {e}", exc_info=True)
            return error_payload(TYPE_TEXT_ERROR)
        return None

    async def move_mouse(self, page: Page, request: MoveMouse) -> Optional[Dict[str, Any]]:
        """click 为真时在 (x, y) 点击，否则只移动鼠标"""
        try:
            if request.click:
                await page.mouse.click(request.x, request.y)
            else:
                await page.mouse.move(request.x, request.y)
        except Exception as e:
            logger.error(f"鼠标操作失败 ({request.page_id}, {request.x}, {request.y}): {e}", exc_info=True)
            return error_payload(MOVE_MOUSE_ERROR)
        return None

    # 页面信息获取
    async def get_screenshot(self, page: Page, request: GetScreenshot) -> Dict[str, Any]:
        """截图并以 base64 文本返回"""
        try:
            data = await page.screenshot()
        except Exception as e:
            logger.error(f"截图失败 ({request.page_id}): {e}", exc_info=True)
            return error_payload(SCREENSHOT_ERROR)
        return {"screenshot": base64.b64encode(data).decode("ascii")}

    async def get_interactive_elements(self, page: Page, request: GetInteractiveElements) -> Dict[str, Any]:
        """
        列出页面中的可交互元素

        每个元素按文档顺序写入索引属性（ELEMENT_INDEX_ATTRIBUTE），
        DOM 未变化时重复调用得到相同索引。
        """
        items = await page.evaluate(
            INTERACTIVE_ELEMENTS_SCRIPT,
            [interactive_selector(), ELEMENT_INDEX_ATTRIBUTE],
        )
        return {"items": items}

    async def observe(self, page: Page, request: Observe) -> Dict[str, Any]:
        """获取无障碍树快照并扁平化"""
        snapshot = await page.accessibility.snapshot()
        if not snapshot:
            return error_payload(NO_SNAPSHOT)
        return {"snapshot": flatten_snapshot(snapshot)}
