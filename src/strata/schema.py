"""Config schema and the default config provider.

Every field carries a default, so dumping a bare ``StrataConfig`` yields a
schema-complete tree. Keys are persisted in camelCase (``fuzzThreshold``),
the models accept either spelling on validation.
"""

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from strata.types import MergePolicy, ResolvedConfig


class _Section(BaseModel):
    """Base for all config sections.

    Unknown keys are allowed so configs written by newer versions still load.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


# --- commands ---


class NoteLookupConfig(_Section):
    selection_mode: Literal["extract", "link", "none"] = "extract"
    confirm_vault_on_create: bool = True
    vault_selection_mode_on_create: Literal["smart", "alwaysPrompt"] = "smart"
    leave_trace: bool = False
    bubble_up_create_new: bool = True
    fuzz_threshold: float = 0.2


class LookupConfig(_Section):
    note: NoteLookupConfig = Field(default_factory=NoteLookupConfig)


class RandomNoteConfig(_Section):
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class InsertNoteLinkConfig(_Section):
    alias_mode: Literal["snippet", "selection", "title", "prompt", "none"] = "none"
    enable_multi_select: bool = False


class InsertNoteIndexConfig(_Section):
    enable_marker: bool = False


class CopyNoteLinkConfig(_Section):
    alias_mode: Literal["title", "none"] = "title"


class CommandsConfig(_Section):
    lookup: LookupConfig = Field(default_factory=LookupConfig)
    random_note: RandomNoteConfig = Field(default_factory=RandomNoteConfig)
    insert_note_link: InsertNoteLinkConfig = Field(default_factory=InsertNoteLinkConfig)
    insert_note_index: InsertNoteIndexConfig = Field(
        default_factory=InsertNoteIndexConfig
    )
    copy_note_link: CopyNoteLinkConfig = Field(default_factory=CopyNoteLinkConfig)
    template_hierarchy: str = "template"


# --- workspace ---

AddBehavior = Literal["childOfDomain", "childOfCurrent", "asOwnDomain"]


class VaultEntry(_Section):
    """A vault reference. Only the path is required."""

    fs_path: str
    name: str | None = None


class JournalConfig(_Section):
    daily_domain: str = "daily"
    name: str = "journal"
    date_format: str = "y.MM.dd"
    add_behavior: AddBehavior = "childOfDomain"


class ScratchConfig(_Section):
    name: str = "scratch"
    date_format: str = "y.MM.dd.HHmmss"
    add_behavior: AddBehavior = "asOwnDomain"


def _default_status_symbols() -> dict[str, str]:
    return {"": " ", "wip": "w", "done": "x", "assigned": "a", "blocked": "b"}


class TaskConfig(_Section):
    name: str = "task"
    date_format: str = "y.MM.dd"
    add_behavior: AddBehavior = "asOwnDomain"
    status_symbols: dict[str, str] = Field(default_factory=_default_status_symbols)
    todo_integration: bool = False
    create_task_selection_type: Literal["selection2link", "none"] = "selection2link"


class GraphConfig(_Section):
    zoom_speed: float = 1.0
    create_stub: bool = False


class WorkspaceConfig(_Section):
    vaults: list[VaultEntry] = Field(default_factory=list)
    journal: JournalConfig = Field(default_factory=JournalConfig)
    scratch: ScratchConfig = Field(default_factory=ScratchConfig)
    task: TaskConfig = Field(default_factory=TaskConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    enable_auto_create_on_definition: bool = False
    enable_x_vault_wiki_link: bool = False
    enable_remote_vault_init: bool = True
    workspace_vault_sync_mode: Literal["skip", "noPush", "noCommit", "sync"] = (
        "noCommit"
    )
    enable_auto_fold_frontmatter: bool = False
    max_previews_cached: int = 10
    max_note_length: int = 204800
    enable_user_tags: bool = True
    enable_hash_tags: bool = True
    enable_editor_decorations: bool = True
    enable_full_hierarchy_note_title: bool = False
    enable_handlebar_templates: bool = True
    enable_smart_refs: bool = False


# --- preview / publishing ---


class PreviewConfig(_Section):
    enable_fm_title: bool = Field(default=True, alias="enableFMTitle")
    enable_note_title_for_link: bool = True
    enable_pretty_refs: bool = True
    enable_katex: bool = True
    automatically_show_preview: bool = False


class SeoConfig(_Section):
    title: str = "Strata"
    description: str = "Personal knowledge space"


class GithubConfig(_Section):
    enable_edit_link: bool = True
    edit_link_text: str = "Edit this page on GitHub"
    edit_branch: str = "main"
    edit_view_mode: Literal["tree", "edit"] = "tree"


class PublishingConfig(_Section):
    enable_fm_title: bool = Field(default=True, alias="enableFMTitle")
    enable_note_title_for_link: bool = True
    enable_pretty_refs: bool = True
    enable_katex: bool = True
    copy_assets: bool = True
    site_hierarchies: list[str] = Field(default_factory=lambda: ["root"])
    write_stubs: bool = False
    site_root_dir: str = "docs"
    seo: SeoConfig = Field(default_factory=SeoConfig)
    github: GithubConfig = Field(default_factory=GithubConfig)
    enable_site_last_modified: bool = True
    enable_front_matter_tags: bool = True
    enable_hashes_for_fm_tags: bool = Field(
        default=False, alias="enableHashesForFMTags"
    )


CURRENT_CONFIG_VERSION = 5


class StrataConfig(_Section):
    """The whole config document (strata.yml)."""

    version: int = CURRENT_CONFIG_VERSION
    commands: CommandsConfig = Field(default_factory=CommandsConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    preview: PreviewConfig = Field(default_factory=PreviewConfig)
    publishing: PublishingConfig = Field(default_factory=PublishingConfig)


# Fields whose override entries add to the base list instead of replacing it.
# Everything not listed here is merged with MergePolicy.REPLACE.
MERGE_POLICIES: dict[str, MergePolicy] = {
    "workspace.vaults": MergePolicy.UNION,
}


def generate_default() -> ResolvedConfig:
    """Return a fresh, schema-complete default config tree."""
    return StrataConfig().model_dump(by_alias=True, mode="json")


def validate_shape(config: Mapping[str, Any]) -> StrataConfig:
    """Check a resolved tree against the schema.

    Raises:
        pydantic.ValidationError: If a field has the wrong shape.
    """
    return StrataConfig.model_validate(config)
