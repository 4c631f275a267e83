"""
页面注册表：客户端页面标识 -> Playwright Page
"""
import logging
from typing import Dict, List, Optional

from playwright.async_api import Page

from .config import DEFAULT_PAGE_ID
from .models import PageAlreadyExistsError

logger = logging.getLogger(__name__)


class PageRegistry:
    """页面注册表（只增不删，页面随浏览器进程结束而销毁）"""

    def __init__(self):
        self._pages: Dict[str, Page] = {}

    def register(self, page_id: str, page: Page) -> None:
        """绑定页面标识，已存在时抛出 PageAlreadyExistsError 且不做任何修改"""
        if page_id in self._pages:
            raise PageAlreadyExistsError(page_id)
        self._pages[page_id] = page
        logger.info(f"页面已注册: {page_id} (共 {len(self._pages)} 个)")

    def resolve(self, page_id: Optional[str]) -> Optional[Page]:
        """查找页面，不存在时返回 None"""
        if not isinstance(page_id, str):
            return None
        return self._pages.get(page_id)

    def seed_default(self, page: Page) -> None:
        """启动时绑定默认页面（仅启动流程调用）"""
        self._pages[DEFAULT_PAGE_ID] = page

    def page_ids(self) -> List[str]:
        return list(self._pages)

    def __contains__(self, page_id: object) -> bool:
        return isinstance(page_id, str) and page_id in self._pages

    def __len__(self) -> int:
        return len(self._pages)
