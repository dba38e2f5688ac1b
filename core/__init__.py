"""Core service layer for Prompt Organizer.

Updates:
  v0.3.0 - 2026-10-04 - Export script generation and imaging helpers.
  v0.2.0 - 2026-09-26 - Export backup reconciler, storage backends and factory.
  v0.1.0 - 2026-09-19 - Surface the entity store, category tree and prompt lifecycle APIs.
"""

from models.category_model import Category
from models.prompt_model import PromptEntry

from .backup import (
    BACKUP_FORMAT_VERSION,
    BackupReconciler,
    ImportCandidate,
    ImportMode,
    ImportResult,
    ImportStatus,
    backup_filename,
    parse_backup_document,
)
from .category_tree import CategoryTreeManager
from .confirm import ConfirmCallback, always_confirm, never_confirm
from .exceptions import (
    BackupFormatError,
    CategoryError,
    CategoryNotFoundError,
    ImageProcessingError,
    InvalidTargetError,
    LastCategoryError,
    PromptError,
    PromptNotFoundError,
    PromptOrganizerError,
    ScriptGenerationError,
    StorageError,
)
from .factory import build_organizer, build_script_generator, build_storage
from .imaging import create_thumbnail
from .lifecycle import DeleteOutcome, PromptCounts, PromptLifecycleManager, filter_and_sort_prompts
from .organizer import GENERATION_FAILED_PLACEHOLDER, NO_CODE_PLACEHOLDER, PromptOrganizer
from .script_generation import LiteLLMScriptGenerator, build_script_request_text
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage, SQLiteStorage
from .store import EntityStore
from .view_state import SortOption, ViewState

__all__ = [
    "BACKUP_FORMAT_VERSION",
    "BackupFormatError",
    "BackupReconciler",
    "Category",
    "CategoryError",
    "CategoryNotFoundError",
    "CategoryTreeManager",
    "ConfirmCallback",
    "DeleteOutcome",
    "EntityStore",
    "GENERATION_FAILED_PLACEHOLDER",
    "ImageProcessingError",
    "ImportCandidate",
    "ImportMode",
    "ImportResult",
    "ImportStatus",
    "InvalidTargetError",
    "JsonFileStorage",
    "KeyValueStorage",
    "LastCategoryError",
    "LiteLLMScriptGenerator",
    "MemoryStorage",
    "NO_CODE_PLACEHOLDER",
    "PromptCounts",
    "PromptEntry",
    "PromptError",
    "PromptLifecycleManager",
    "PromptNotFoundError",
    "PromptOrganizer",
    "PromptOrganizerError",
    "SQLiteStorage",
    "ScriptGenerationError",
    "SortOption",
    "StorageError",
    "ViewState",
    "always_confirm",
    "backup_filename",
    "build_organizer",
    "build_script_generator",
    "build_script_request_text",
    "build_storage",
    "create_thumbnail",
    "filter_and_sort_prompts",
    "never_confirm",
    "parse_backup_document",
]
