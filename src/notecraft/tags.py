from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from notecraft.models import TagNode

logger = logging.getLogger(__name__)


class TagStoreError(ValueError):
    pass


def parse_tag_store(data: Any) -> list[TagNode]:
    if not isinstance(data, list):
        raise TagStoreError("Tag store must be a JSON array.")
    nodes: list[TagNode] = []
    for idx, item in enumerate(data, 1):
        if isinstance(item, str):
            nodes.append(TagNode(name=item))
            continue
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise TagStoreError(f"Tag store entry {idx} must be a string or an object with a 'name'.")
        subtags = item.get("subtags")
        if subtags is None:
            nodes.append(TagNode(name=item["name"]))
            continue
        if not isinstance(subtags, list) or not all(isinstance(s, str) for s in subtags):
            raise TagStoreError(f"Tag store entry {idx} ('{item['name']}') has invalid subtags.")
        nodes.append(TagNode(name=item["name"], subtags=tuple(subtags)))
    return nodes


def load_tag_store(path: Path) -> list[TagNode]:
    if not path.is_file():
        raise FileNotFoundError(f"Tags file '{path}' not found.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise TagStoreError(f"Tags file '{path}' is not valid JSON: {exc}") from exc
    nodes = parse_tag_store(data)
    logger.debug("Loaded %d top-level tags from %s", len(nodes), path)
    return nodes
