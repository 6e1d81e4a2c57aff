from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List

from content_insights.models import ArticleInput


def append_jsonl(path: Path, obj: Dict[str, Any]) -> None:
    """
    Append one JSON object as one JSONL line.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(obj, ensure_ascii=False)
    with path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")
        f.flush()


def iter_jsonl(path: Path) -> Iterator[Dict[str, Any]]:
    """
    Iterate JSONL as dictionaries.
    Skips empty lines.
    """
    if not path.exists():
        raise FileNotFoundError(f"JSONL file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            yield json.loads(line)


def load_articles(path: Path) -> List[ArticleInput]:
    """
    Read an article batch from disk.

    - *.jsonl: one article object per line
    - otherwise JSON: a list of articles, or an object holding the list
      under "data" or "articles" (the search provider's response shape)
    """
    if not path.exists():
        raise FileNotFoundError(f"Articles file not found: {path}")

    if path.suffix.lower() == ".jsonl":
        return [ArticleInput.model_validate(obj) for obj in iter_jsonl(path)]

    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("data", data.get("articles"))
    if not isinstance(data, list):
        raise ValueError(f"No article list found in {path}")

    return [ArticleInput.model_validate(obj) for obj in data]
