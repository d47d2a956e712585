from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, List, Mapping

from .errors import NotFoundError
from .models import NewsRecord
from .repositories import NewsRepository
from .repositories.base import normalize_id

logger = logging.getLogger(__name__)


def read_documents(path: Path) -> List[Mapping[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"Seed file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, Mapping):
        data = data.get("news") or []
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of news documents")
    return data


def import_documents(repository: NewsRepository, documents: Iterable[Mapping[str, Any]]) -> int:
    """Normalize legacy documents and add the ones not already stored. Returns the number added."""
    inserted = 0
    for doc in documents:
        try:
            record = NewsRecord.from_mapping(doc)
        except ValueError as exc:
            logger.warning("[seed] skipping document id=%s: bad timestamp (%s)", doc.get("_id") or doc.get("id"), exc)
            continue
        try:
            record = replace(record, id=normalize_id(record.id))
        except NotFoundError:
            logger.warning("[seed] skipping document with malformed id=%s", record.id)
            continue
        if not record.title.strip() or not record.description.strip():
            logger.warning("[seed] skipping %s: title and description are required", record.id)
            continue
        if repository.exists(record.id):
            continue
        repository.add(record)
        inserted += 1
    return inserted


def load_legacy_documents(repository: NewsRepository, path: str | Path) -> int:
    path = Path(path)
    inserted = import_documents(repository, read_documents(path))
    logger.info("[seed] inserted=%s path=%s", inserted, path)
    return inserted


def main() -> None:
    from .config import get_settings
    from .main import build_repository

    parser = argparse.ArgumentParser(description="Import stored news documents into the record store")
    parser.add_argument("path", type=Path, help="JSON array of news documents (any historical schema)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    repository = build_repository(get_settings())
    load_legacy_documents(repository, args.path)


if __name__ == "__main__":
    main()
