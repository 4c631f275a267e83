"""
配置常量（均可通过环境变量覆盖）
"""
import os

# 服务器配置
DEFAULT_HOST = os.getenv("BROWSER_WS_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("BROWSER_WS_PORT", "8080"))

# 浏览器配置
BROWSER_TYPE = os.getenv("BROWSER_TYPE", "firefox")
HEADLESS = os.getenv("BROWSER_HEADLESS", "false").lower() == "true"
SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

# 页面配置
DEFAULT_PAGE_ID = "default"

# input_text 逐字符输入的间隔（毫秒）
TYPING_DELAY_MS = int(os.getenv("BROWSER_TYPING_DELAY_MS", "100"))

# get_interactive_elements 写入元素的索引属性名
ELEMENT_INDEX_ATTRIBUTE = os.getenv("BROWSER_ELEMENT_INDEX_ATTRIBUTE", "data-element-index")

# 日志
LOG_LEVEL = os.getenv("BROWSER_WS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
