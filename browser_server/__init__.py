"""
Browser WebSocket Server - 模块化结构

- models: 请求类型与错误信息
- page_registry: 页面注册表
- snapshot: 可交互元素脚本与无障碍树扁平化
- browser_manager: 浏览器管理器核心类
- dispatcher: 消息分发
- config: 配置常量
"""

from .models import BrowserLaunchError, PageAlreadyExistsError, parse_request
from .page_registry import PageRegistry
from .browser_manager import PlaywrightBrowserManager
from .dispatcher import dispatch, handle_message
from .config import DEFAULT_PORT, DEFAULT_HOST

__all__ = [
    "BrowserLaunchError",
    "PageAlreadyExistsError",
    "parse_request",
    "PageRegistry",
    "PlaywrightBrowserManager",
    "dispatch",
    "handle_message",
    "DEFAULT_PORT",
    "DEFAULT_HOST",
]
