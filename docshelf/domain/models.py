"""
Pydantic models for the docshelf library.

This module defines all data models used throughout the application, including:
- Library configuration
- Language packs and their topics (bundled baseline and downloaded overlays)
- Derived read views (catalog sections, enriched topics, quizzes, streaks)
- Results of pack lifecycle operations
- Remote store index entries

Pack documents are validated here, at the parse boundary. Code deeper in the
pipeline works with these models and never with raw dictionaries.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Fallback buckets for documents that leave these fields out.
DEFAULT_CATEGORY = "Downloaded"
DEFAULT_GROUP = "General"
DEFAULT_COLOR = "#888888"

QUIZ_QUESTION = "Which concept does this description belong to?"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# ---------------------------------------------------------------------------
# Configuration Models
# ---------------------------------------------------------------------------


class LibraryConfig(BaseModel):
    """
    Top-level configuration for the library.

    Persisted at: <DATA_DIR>/library.json
    """

    store_index_url: str = Field(
        default="https://gist.githubusercontent.com/Lokesh-Sai-Srinivas/35667dd39d77ef76cdd7b0bdda28b239/raw/catalog.json",
        description="URL of the remote store index listing downloadable language packs.",
    )
    overlay_dir_name: str = Field(
        default="docs",
        description="Name of the sandboxed subdirectory (under the data directory) holding downloaded packs.",
    )
    download_timeout_seconds: float = Field(
        default=60.0,
        ge=1,
        description="Timeout (in seconds) applied to pack downloads and store index requests.",
    )
    log_level: LogLevel = Field(
        default="INFO",
        description="Root logging level used when the HTTP application starts.",
    )


# ---------------------------------------------------------------------------
# Pack Models
# ---------------------------------------------------------------------------


class Topic(BaseModel):
    """
    One reference entry inside a language pack.

    Only `id` is required. Topic ids are unique within their pack; the same id
    may appear in different packs, in which case lookups take the first match
    in catalog order.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(
        min_length=1,
        description="Topic identifier, also used as the favorites and quiz key.",
    )
    title: str = Field(default="", description="Display title of the topic.")
    description: str = Field(default="", description="Short prose explanation of the concept.")
    code: str = Field(default="", description="Example snippet.")
    group: str = Field(
        default=DEFAULT_GROUP,
        description="Section inside the language the topic belongs to.",
    )

    @field_validator("group", mode="before")
    @classmethod
    def _blank_group_is_general(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_GROUP
        return value


class LanguagePack(BaseModel):
    """
    A programming language's bundle of metadata and topics.

    This is the unit of install and delete. When the baseline and an overlay
    file share an `id`, the overlay replaces the baseline pack as a whole.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(
        min_length=1,
        description="Stable unique key of the pack across the merged catalog.",
    )
    name: str = Field(default="", description="Display name of the language.")
    icon: str = Field(default="", description="Emoji/glyph or URI shown next to the name.")
    color: str = Field(default=DEFAULT_COLOR, description="Display colour as a hex string.")
    category: str = Field(
        default=DEFAULT_CATEGORY,
        description="Listing section the pack is shown under.",
    )
    topics: List[Topic] = Field(description="Ordered topics of the pack.")

    @field_validator("category", "color", mode="before")
    @classmethod
    def _blank_means_default(cls, value, info):
        # Documents in the wild use null or "" for "not set".
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value

    @model_validator(mode="before")
    @classmethod
    def _name_defaults_to_id(cls, data):
        if isinstance(data, dict) and not data.get("name"):
            data = {**data, "name": data.get("id") or ""}
        return data


class BaselineDocument(BaseModel):
    """Shape of the bundled baseline file: `{"languages": [...]}`."""

    languages: List[LanguagePack] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Derived View Models
# ---------------------------------------------------------------------------


class EnrichedTopic(Topic):
    """
    A topic together with display metadata of the pack that owns it.
    """

    language_id: str
    language_name: str
    language_color: str = DEFAULT_COLOR
    language_icon: str = ""

    @classmethod
    def from_pack(cls, topic: Topic, pack: LanguagePack) -> "EnrichedTopic":
        return cls(
            **topic.model_dump(),
            language_id=pack.id,
            language_name=pack.name,
            language_color=pack.color,
            language_icon=pack.icon,
        )


class CatalogSection(BaseModel):
    """One category of the language listing with its packs in catalog order."""

    title: str
    packs: List[LanguagePack] = Field(default_factory=list)


class TopicSection(BaseModel):
    """One group of a language's topics, topics in pack order."""

    title: str
    topics: List[Topic] = Field(default_factory=list)


class QuizOption(BaseModel):
    id: str
    title: str
    language_name: str = ""
    language_color: str = DEFAULT_COLOR


class Quiz(BaseModel):
    """
    A multiple-choice question built from the topic pool.

    `snippet` is the description of the correct topic and `correct_option_id`
    is that topic's id; it is always one of the four `options`.
    """

    question: str = QUIZ_QUESTION
    snippet: str
    language: str
    options: List[QuizOption]
    correct_option_id: str


class StreakStatus(BaseModel):
    count: int = Field(default=0, ge=0, description="Number of distinct days with a completed daily task.")
    completed_today: bool = Field(default=False, description="True if the daily task was already completed today.")
    last_completed: Optional[str] = Field(
        default=None,
        description="ISO date (YYYY-MM-DD) of the last completed day, if any.",
    )


# ---------------------------------------------------------------------------
# Operation Result Models
# ---------------------------------------------------------------------------


class FailureKind(str, Enum):
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    IO = "io"
    INVALID_FILENAME = "invalid_filename"
    NOT_FOUND = "not_found"


class PackOperationResult(BaseModel):
    """
    Outcome of installing or removing an overlay pack.

    Evaluates as a boolean equal to `succeeded`, so callers that only care
    whether the operation worked can write `if await installer.install_pack(...)`.
    """

    succeeded: bool
    failure: Optional[FailureKind] = None
    detail: Optional[str] = None

    def __bool__(self) -> bool:
        return self.succeeded

    @classmethod
    def ok(cls) -> "PackOperationResult":
        return cls(succeeded=True)

    @classmethod
    def failed(cls, failure: FailureKind, detail: Optional[str] = None) -> "PackOperationResult":
        return cls(succeeded=False, failure=failure, detail=detail)


class CatalogLoadReport(BaseModel):
    """
    Full outcome of a catalog load.

    `packs` is the merged catalog. The other fields describe what happened to
    the overlay directory while building it; none of them is an error for the
    caller.
    """

    packs: List[LanguagePack] = Field(default_factory=list)
    overlay_ids: List[str] = Field(
        default_factory=list,
        description="Ids of packs that came from (or were replaced by) overlay files.",
    )
    skipped_files: List[str] = Field(
        default_factory=list,
        description="Overlay files that parsed but lack required fields. Left on disk.",
    )
    quarantined_files: List[str] = Field(
        default_factory=list,
        description="Overlay files that failed to parse and were deleted.",
    )
    overlay_error: Optional[str] = Field(
        default=None,
        description="Set when the overlay directory could not be listed; packs is then baseline only.",
    )


# ---------------------------------------------------------------------------
# Remote Store Models
# ---------------------------------------------------------------------------


class StoreEntry(BaseModel):
    """
    One row of the remote store index: a pack that can be downloaded.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1, description="Id of the pack the download provides.")
    name: str = Field(description="Display name of the language.")
    category: str = Field(default=DEFAULT_CATEGORY)
    icon: str = Field(default="")
    color: str = Field(default=DEFAULT_COLOR)
    url: str = Field(description="Where the pack document is downloaded from.")
    filename: str = Field(min_length=1, description="Name the pack is stored under in the overlay directory.")


class StoreListing(StoreEntry):
    installed: bool = False


class InstallRequest(BaseModel):
    url: str
    filename: str
