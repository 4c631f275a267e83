#!/usr/bin/env python3
"""
基于 Starlette WebSocket 的浏览器远程控制服务器

项目结构：
- browser_server/
  ├── __init__.py          # 模块导出
  ├── config.py            # 配置常量
  ├── models.py            # 请求类型与错误信息
  ├── page_registry.py     # 页面注册表
  ├── snapshot.py          # 可交互元素脚本与无障碍树扁平化
  ├── browser_manager.py   # 浏览器管理器（核心逻辑）
  └── dispatcher.py        # 消息分发
"""
import argparse
import asyncio
import contextlib
import json
import logging
from typing import Any, Optional, Set

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute
from starlette.websockets import WebSocket, WebSocketDisconnect

from browser_server import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    PlaywrightBrowserManager,
    handle_message,
)
from browser_server.config import BROWSER_TYPE, HEADLESS, LOG_FORMAT, LOG_LEVEL, SUPPORTED_BROWSERS
from browser_server.models import PARSE_ERROR, RequestDecodeError, decode_message, error_payload

logger = logging.getLogger(__name__)


def browser_status(browser_manager: PlaywrightBrowserManager) -> str:
    return "up" if browser_manager.is_running else "down"


async def send_result(websocket: WebSocket, result: Any):
    await websocket.send_text(json.dumps(result, ensure_ascii=False))


async def send_result_safely(websocket: WebSocket, result: Any) -> bool:
    """发送响应，连接已关闭时只记录日志"""
    try:
        await send_result(websocket, result)
    except (WebSocketDisconnect, RuntimeError) as e:
        logger.warning(f"发送响应失败，连接已关闭: {e}")
        return False
    return True


async def process_message(browser_manager: PlaywrightBrowserManager, websocket: WebSocket, data: dict):
    """处理单条消息；未捕获的引擎异常只丢弃本条响应，不断开连接"""
    try:
        result = await handle_message(browser_manager, data)
    except Exception as e:
        logger.error(f"处理消息失败 (message={data.get('message')!r}, pageId={data.get('pageId')!r}): {e}", exc_info=True)
        return
    await send_result_safely(websocket, result)


def create_app(browser_manager: PlaywrightBrowserManager) -> Starlette:
    """创建 Starlette 应用，浏览器在 lifespan 中启动与关闭"""

    @contextlib.asynccontextmanager
    async def lifespan(app):
        # 启动失败时 BrowserLaunchError 直接向上抛出，服务器不会开始监听
        await browser_manager.start()
        logger.info(f"WebSocket 服务器就绪，浏览器状态: {browser_status(browser_manager)}")
        try:
            yield
        finally:
            await browser_manager.stop()

    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        logger.info(f"客户端已连接: {websocket.client}")
        await send_result(websocket, {"message": "browser_status", "status": browser_status(browser_manager)})

        pending: Set[asyncio.Task] = set()
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break

                raw: Optional[str] = message.get("text")
                if raw is None and message.get("bytes") is not None:
                    try:
                        raw = message["bytes"].decode("utf-8")
                    except UnicodeDecodeError:
                        raw = None

                try:
                    data = decode_message(raw)
                except RequestDecodeError as e:
                    logger.warning(f"JSON 解析失败: {e}")
                    await send_result_safely(websocket, error_payload(PARSE_ERROR))
                    continue

                logger.debug(f"收到消息: {data}")
                task = asyncio.create_task(process_message(browser_manager, websocket, data))
                pending.add(task)
                task.add_done_callback(pending.discard)
        except WebSocketDisconnect:
            pass
        finally:
            for task in pending:
                task.cancel()
            logger.info(f"客户端已断开: {websocket.client}")

    async def health_check(request: Request):
        """健康检查"""
        return JSONResponse({
            "status": "ok",
            "browser": browser_status(browser_manager),
            "pages": browser_manager.registry.page_ids(),
        })

    return Starlette(
        routes=[
            WebSocketRoute("/", endpoint=websocket_endpoint),
            Route("/health", endpoint=health_check, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


def main():
    """启动 WebSocket 服务器"""
    import uvicorn

    parser = argparse.ArgumentParser(description="Browser remote-control WebSocket server")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--browser", choices=SUPPORTED_BROWSERS, default=BROWSER_TYPE)
    parser.add_argument("--headless", action="store_true", default=HEADLESS)
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    browser_manager = PlaywrightBrowserManager(browser_type=args.browser, headless=args.headless)
    app = create_app(browser_manager)

    logger.info(f"WebSocket 地址: ws://{args.host if args.host != '0.0.0.0' else 'localhost'}:{args.port}/")
    uvicorn.run(app, host=args.host, port=args.port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
