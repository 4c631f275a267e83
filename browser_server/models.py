"""
数据模型定义

每种客户端消息对应一个 dataclass，`message` 字段作为判别字段，
通过 MESSAGE_TYPES 映射到具体类型。
"""
import json
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union


# 错误信息（协议的一部分，客户端按原文匹配）
PARSE_ERROR = "Error while parsing JSON"
PAGE_NOT_FOUND = "Page with requested pageId not found"
UNKNOWN_MESSAGE = "No message found"
PAGE_ALREADY_EXISTS = "Page already exists"
NAVIGATE_ERROR = "Error while navigating"
CLICK_ERROR = "Error while executing click"
INPUT_TEXT_ERROR = "Error while typing"
TYPE_TEXT_ERROR = "Could not type"
MOVE_MOUSE_ERROR = "Could not move mouse"
SCREENSHOT_ERROR = "Error while taking screenshot"
NO_SNAPSHOT = "No snapshot available"


class BrowserServerError(Exception):
    """服务器异常基类"""


class BrowserLaunchError(BrowserServerError):
    """浏览器启动失败（不提供降级模式，进程直接退出）"""


class PageAlreadyExistsError(BrowserServerError):
    """页面标识已被占用"""

    def __init__(self, page_id: str):
        super().__init__(f"Page {page_id!r} already exists")
        self.page_id = page_id


class RequestDecodeError(BrowserServerError):
    """入站消息无法解析为 JSON 对象"""


def error_payload(message: str) -> Dict[str, str]:
    return {"error": message}


@dataclass
class CreatePage:
    page_id: str


@dataclass
class Navigate:
    page_id: str
    url: Optional[str] = None


@dataclass
class GetHtml:
    page_id: str


@dataclass
class Click:
    page_id: str
    selector: Optional[str] = None


@dataclass
class InputText:
    page_id: str
    selector: Optional[str] = None
    text: Optional[str] = None
    enter: bool = False


@dataclass
class TypeText:
    page_id: str
    text: Optional[str] = None
    enter: bool = False


@dataclass
class MoveMouse:
    page_id: str
    x: Optional[float] = None
    y: Optional[float] = None
    click: bool = False


@dataclass
class GetScreenshot:
    page_id: str


@dataclass
class GetInteractiveElements:
    page_id: str


@dataclass
class Observe:
    page_id: str


@dataclass
class UnknownMessage:
    """未知判别字段，仍保留 page_id 以便先做页面校验"""
    page_id: str
    message: Any = None


Request = Union[
    CreatePage,
    Navigate,
    GetHtml,
    Click,
    InputText,
    TypeText,
    MoveMouse,
    GetScreenshot,
    GetInteractiveElements,
    Observe,
    UnknownMessage,
]

MESSAGE_TYPES = {
    "create_page": CreatePage,
    "navigate": Navigate,
    "get_html": GetHtml,
    "click": Click,
    "input_text": InputText,
    "type_text": TypeText,
    "move_mouse": MoveMouse,
    "get_screenshot": GetScreenshot,
    "get_interactive_elements": GetInteractiveElements,
    "observe": Observe,
}


FLAG_FIELDS = {"enter", "click"}


def decode_message(raw: Optional[str]) -> Dict[str, Any]:
    """将文本帧解析为 JSON 对象，非对象同样视为解析失败"""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise RequestDecodeError(str(e)) from e
    if not isinstance(data, dict):
        raise RequestDecodeError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_request(data: Dict[str, Any]) -> Request:
    """
    根据 message 字段构造对应的请求对象

    字段级校验交给浏览器引擎：缺失的字段保持为 None，
    由对应的引擎调用失败并转换为错误信息。
    """
    message = data.get("message")
    page_id = data.get("pageId")

    request_type = MESSAGE_TYPES.get(message) if isinstance(message, str) else None
    if request_type is None:
        return UnknownMessage(page_id=page_id, message=message)

    kwargs: Dict[str, Any] = {"page_id": page_id}
    for f in fields(request_type):
        if f.name == "page_id" or f.name not in data:
            continue
        value = data[f.name]
        # enter / click 等开关字段
        if f.name in FLAG_FIELDS:
            value = bool(value)
        kwargs[f.name] = value
    return request_type(**kwargs)
