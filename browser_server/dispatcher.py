"""
消息分发：校验 pageId 后按 message 字段路由到浏览器管理器
"""
import logging
from typing import Any, Awaitable, Callable, Dict

from .browser_manager import PlaywrightBrowserManager
from .models import (
    MESSAGE_TYPES,
    PAGE_NOT_FOUND,
    UNKNOWN_MESSAGE,
    CreatePage,
    Request,
    UnknownMessage,
    error_payload,
    parse_request,
)

logger = logging.getLogger(__name__)

# 请求类型 -> message 名称
MESSAGE_NAMES = {request_type: name for name, request_type in MESSAGE_TYPES.items()}


def create_handlers(browser_manager: PlaywrightBrowserManager) -> Dict[str, Callable[..., Awaitable[Any]]]:
    """message -> 页面操作方法（create_page 单独处理）"""
    return {
        "navigate": browser_manager.navigate,
        "get_html": browser_manager.get_html,
        "click": browser_manager.click,
        "input_text": browser_manager.input_text,
        "type_text": browser_manager.type_text,
        "move_mouse": browser_manager.move_mouse,
        "get_screenshot": browser_manager.get_screenshot,
        "get_interactive_elements": browser_manager.get_interactive_elements,
        "observe": browser_manager.observe,
    }


async def dispatch(browser_manager: PlaywrightBrowserManager, request: Request) -> Any:
    """处理一个已解析的请求"""
    if isinstance(request, CreatePage):
        if not isinstance(request.page_id, str) or not request.page_id:
            return error_payload(PAGE_NOT_FOUND)
        return await browser_manager.create_page(request)

    page = browser_manager.registry.resolve(request.page_id)
    if page is None:
        return error_payload(PAGE_NOT_FOUND)

    if isinstance(request, UnknownMessage):
        logger.warning(f"未知的消息类型: {request.message!r}")
        return error_payload(UNKNOWN_MESSAGE)

    handlers = create_handlers(browser_manager)
    handler = handlers[MESSAGE_NAMES[type(request)]]
    return await handler(page, request)


async def handle_message(browser_manager: PlaywrightBrowserManager, data: Dict[str, Any]) -> Any:
    """处理一条已解码的 JSON 消息"""
    return await dispatch(browser_manager, parse_request(data))
