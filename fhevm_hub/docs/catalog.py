"""``catalog.json``: a machine-readable index of the example registry."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from fhevm_hub.kernel.logging import get_logger
from fhevm_hub.registry.models import Registry

logger = get_logger(__name__)

CATALOG_FILE = "catalog.json"


class CatalogExample(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    slug: str
    title: str
    concept: str
    difficulty: str
    doc_path: str = Field(alias="docPath")


class CatalogCategory(BaseModel):
    name: str
    examples: list[CatalogExample]


class Catalog(BaseModel):
    """Categories and their examples, stamped with the newest input mtime."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: str = Field(alias="generatedAt")
    categories: list[CatalogCategory]


def latest_mtime(files: list[Path]) -> float | None:
    """Newest modification time among ``files``; missing files are ignored."""
    mtimes = [path.stat().st_mtime for path in files if path.exists()]
    return max(mtimes, default=None)


def format_timestamp(timestamp: float) -> str:
    """ISO-8601 UTC with millisecond precision, e.g. ``2025-01-31T12:00:00.000Z``."""
    moment = datetime.fromtimestamp(timestamp, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_catalog(registry: Registry) -> Catalog:
    newest = latest_mtime(registry.input_files())
    if newest is None:
        newest = datetime.now(UTC).timestamp()
    return Catalog(
        generated_at=format_timestamp(newest),
        categories=[
            CatalogCategory(
                name=category,
                examples=[
                    CatalogExample(
                        slug=example.slug,
                        title=example.title,
                        concept=example.concept,
                        difficulty=str(example.difficulty),
                        doc_path=example.doc_path,
                    )
                    for example in registry.categories[category]
                ],
            )
            for category in registry.category_names
        ],
    )


def write_catalog(registry: Registry, docs_dir: Path) -> Path:
    """Write ``catalog.json`` into ``docs_dir`` and return its path."""
    catalog = build_catalog(registry)
    docs_dir.mkdir(parents=True, exist_ok=True)
    target = docs_dir / CATALOG_FILE
    payload = catalog.model_dump(mode="json", by_alias=True)
    target.write_text(f"{json.dumps(payload, indent=2, ensure_ascii=False)}\n", encoding="utf-8")
    logger.info("Generated {}", target)
    return target
