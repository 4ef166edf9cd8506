"""
Catalog of questions, effects, classes and per-class tips/links.

The catalog is read once from a data directory laid out the way the chat
front end expects it:

    questions.json    list of questions
    effects.json      list of (question, option) -> exclude/up/down rules
    classes.json      list of classes
    tips_links.json   {class_id: {"tips": [...], "links": [{label, href}]}}
    config.json       optional front-end settings ({"webhookUrl": ...})

Everything here is read-only once loaded.
"""
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lyra.core.errors import CatalogError
from lyra.utils.logger import get_logger

logger = get_logger("data.catalog")


def _as_id_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (str, int)):
        return [str(value)]
    return [str(v) for v in value]


class Question(BaseModel):
    """A multiple-choice question. `options` is kept raw, see normalize_options."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str = ""
    phase: int = 0
    priority: float = 0
    options: Any = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        return str(v)

    @field_validator("phase", "priority", mode="before")
    @classmethod
    def _missing_number_is_zero(cls, v):
        return 0 if v in (None, "") else v


class Effect(BaseModel):
    """Score/exclusion adjustments triggered by one answer to one question."""
    model_config = ConfigDict(frozen=True)

    question_id: str
    option: str
    exclude: List[str] = Field(default_factory=list)
    up: List[str] = Field(default_factory=list)
    down: List[str] = Field(default_factory=list)

    @field_validator("question_id", "option", mode="before")
    @classmethod
    def _to_str(cls, v):
        return "" if v is None else str(v)

    @field_validator("exclude", "up", "down", mode="before")
    @classmethod
    def _to_id_list(cls, v):
        return _as_id_list(v)


class ClassInfo(BaseModel):
    """A candidate class the questionnaire narrows toward."""
    model_config = ConfigDict(frozen=True)

    class_id: str
    name: str = ""
    summary: str = ""

    @field_validator("class_id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        return str(v)


class Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    href: str


class TipsLinks(BaseModel):
    """Expert tips and shipyard links shown with a recommended class."""
    model_config = ConfigDict(frozen=True)

    tips: List[str] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)

    @field_validator("tips", "links", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v


class Catalog(BaseModel):
    """All static questionnaire data."""
    model_config = ConfigDict(frozen=True)

    questions: List[Question] = Field(default_factory=list)
    effects: List[Effect] = Field(default_factory=list)
    classes: List[ClassInfo] = Field(default_factory=list)
    tips_links: Dict[str, TipsLinks] = Field(default_factory=dict)
    webhook_url: str = ""

    def counts(self) -> Dict[str, int]:
        return {
            "questions": len(self.questions),
            "effects": len(self.effects),
            "classes": len(self.classes),
        }


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Missing catalog file: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Not JSON at {path}: {e}") from e


def load_catalog(catalog_dir: Union[str, Path]) -> Catalog:
    """
    Load and validate the catalog from a data directory.

    Args:
        catalog_dir: Directory holding the catalog JSON files

    Returns:
        Catalog instance

    Raises:
        CatalogError: If a required file is missing or malformed
    """
    base = Path(catalog_dir)
    if not base.is_dir():
        raise CatalogError(f"Catalog directory not found: {base}")

    questions = _read_json(base / "questions.json")
    effects = _read_json(base / "effects.json")
    classes = _read_json(base / "classes.json")
    tips_links = _read_json(base / "tips_links.json")

    # config.json is optional
    webhook_url = ""
    config_path = base / "config.json"
    if config_path.exists():
        try:
            settings = _read_json(config_path)
            if isinstance(settings, dict):
                webhook_url = settings.get("webhookUrl") or ""
        except CatalogError as e:
            logger.warning(f"Ignoring unreadable config.json: {e}")

    try:
        catalog = Catalog(
            questions=questions,
            effects=effects,
            classes=classes,
            tips_links=tips_links or {},
            webhook_url=webhook_url,
        )
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog in {base}: {e}") from e

    logger.info(
        f"Loaded catalog from {base}: Q{len(catalog.questions)} / "
        f"E{len(catalog.effects)} / C{len(catalog.classes)}"
    )
    return catalog


# Global catalog instance
_catalog: Optional[Catalog] = None


def get_catalog() -> Catalog:
    """Get the global catalog, loading it from the configured directory on first use."""
    global _catalog
    if _catalog is None:
        from lyra.core.config import get_config
        _catalog = load_catalog(get_config().catalog_path())
    return _catalog


def set_catalog(catalog: Optional[Catalog]) -> None:
    """Set (or clear) the global catalog instance."""
    global _catalog
    _catalog = catalog
