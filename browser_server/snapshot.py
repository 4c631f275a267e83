"""
页面结构提取：可交互元素脚本与无障碍树扁平化
"""
from typing import Any, Dict, List, Optional

# 可交互元素选择器（按文档顺序匹配）
INTERACTIVE_SELECTORS = [
    "a",
    "button",
    '[role="button"]',
    'input[type="button"]',
    'input[type="submit"]',
    'input[type="checkbox"]',
    'input[type="radio"]',
    "[onclick]",
    "[tabindex]",
    '[role="link"]',
    "summary",
    "input",
    "textarea",
]

# 在页面中执行：给每个匹配元素写入从 0 开始的索引属性并提取属性
INTERACTIVE_ELEMENTS_SCRIPT = """
([selector, indexAttribute]) => {
    const isVisible = (el) => {
        if (typeof el.checkVisibility === 'function') {
            return el.checkVisibility();
        }
        const style = window.getComputedStyle(el);
        const rect = el.getBoundingClientRect();
        return style.display !== 'none'
            && style.visibility !== 'hidden'
            && rect.width > 0
            && rect.height > 0;
    };

    return Array.from(document.querySelectorAll(selector)).map((el, index) => {
        el.setAttribute(indexAttribute, String(index));
        return {
            visible: isVisible(el),
            className: el.getAttribute('class'),
            ariaLabel: el.getAttribute('aria-label'),
            ariaDescription: el.getAttribute('aria-description'),
            ariaRoleDescription: el.getAttribute('aria-roledescription'),
            href: el.getAttribute('href'),
            innerText: el.innerText === undefined ? el.textContent : el.innerText,
            id: el.id,
            index: String(index),
            tagName: el.tagName,
            type: el.getAttribute('type'),
            value: el.value === undefined ? null : el.value,
        };
    });
}
"""


def interactive_selector() -> str:
    return ", ".join(INTERACTIVE_SELECTORS)


def flatten_snapshot(node: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    将无障碍树扁平化为列表

    先序遍历（父节点在前，子节点从左到右），
    只收录至少有一个子节点的节点；收录时去掉 children 字段。
    """
    if not node:
        return []

    children = node.get("children") or []
    items: List[Dict[str, Any]] = []
    if children:
        items.append({key: value for key, value in node.items() if key != "children"})
    for child in children:
        items.extend(flatten_snapshot(child))
    return items
