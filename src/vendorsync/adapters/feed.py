"""Load normalized vendor feeds from JSON files.

Records are validated upstream; this loader only checks the fields the diff
engine keys on and hands back the original dictionaries untouched, so their
key order (and therefore their content hash) is preserved.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vendorsync.config import get_feed_config
from vendorsync.domain.errors import FeedError

if TYPE_CHECKING:
    from vendorsync.config import FeedConfig
    from vendorsync.domain.normalized import NormalizedProduct

log = getLogger(__name__)


class FeedBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class FeedVendorRef(FeedBaseModel):
    slug: str = Field(min_length=1)
    name: str | None = None


class FeedVariant(FeedBaseModel):
    id: str = Field(min_length=1)
    type: str


class FeedRecord(FeedBaseModel):
    vendor: FeedVendorRef
    catalog_id: str = Field(alias="catalogId", min_length=1)
    category: str
    variants: list[FeedVariant] = Field(min_length=1)

    @field_validator("catalog_id")
    @classmethod
    def _reject_blank_catalog_id(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("catalogId must not be blank")
        return value


@dataclass(frozen=True, slots=True)
class LoadedFeed:
    records: list[NormalizedProduct]
    source_path: str


def parse_catalog_feed(data: object) -> list[NormalizedProduct]:
    """Check the boundary shape of decoded feed ``data`` and return its records."""

    if not isinstance(data, list):
        raise FeedError("Catalog feed must be a JSON array of products")
    rows = cast("list[Any]", data)
    problems: list[str] = []
    for index, row in enumerate(rows):
        try:
            FeedRecord.model_validate(row)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            problems.append(f"record {index}: {location}: {first['msg']}")
    if problems:
        raise FeedError("Invalid catalog feed: " + "; ".join(problems))
    return cast("list[NormalizedProduct]", rows)


def read_catalog_feed(path: Path) -> list[NormalizedProduct]:
    with path.open(encoding="utf-8") as handle:
        data = json.load(handle)
    return parse_catalog_feed(data)


def load_catalog_feed(
    vendor: str,
    *,
    explicit_path: str | Path | None = None,
    config: FeedConfig | None = None,
) -> LoadedFeed:
    """Read the first usable feed among the candidate paths for ``vendor``."""

    feed_config = config or get_feed_config()
    tried: list[str] = []
    last_error: Exception | None = None
    for candidate in feed_config.candidate_paths(vendor, explicit_path):
        tried.append(candidate)
        try:
            records = read_catalog_feed(Path(candidate))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, FeedError) as exc:
            log.debug("Skipping feed candidate %s: %s", candidate, exc)
            last_error = exc
            continue
        log.info("Loaded %s records for vendor %s from %s", len(records), vendor, candidate)
        return LoadedFeed(records=records, source_path=candidate)

    detail = f": {last_error}" if last_error is not None else ""
    raise FeedError(f"Unable to read {vendor} catalog from paths {', '.join(tried)}{detail}")
