from typing import List

from pdfstudio.schemas.mindmap import MindMapNode
from pdfstudio.schemas.outline import OutlineNode

EXTRACTED_TEXT_FILENAME = "extracted-text.txt"
OUTLINE_FILENAME = "outline.txt"
MINDMAP_FILENAME = "mindmap.txt"


def format_outline(nodes: List[OutlineNode], depth: int = 0) -> str:
    """Flatten an outline into bullet lines: '•' at depth 0, '◦' deeper, two spaces per level."""
    lines = []
    for node in nodes:
        indent = "  " * depth
        bullet = "•" if depth == 0 else "◦"
        lines.append(f"{indent}{bullet} {node.title}\n")
        if node.children:
            lines.append(format_outline(node.children, depth + 1))
    return "".join(lines)


def format_mindmap(node: MindMapNode, depth: int = 0) -> str:
    """Indented plain-text rendering of a mind map, root first."""
    text = f"{'  ' * depth}{'' if depth == 0 else '- '}{node.label}\n"
    for child in node.children:
        text += format_mindmap(child, depth + 1)
    return text
