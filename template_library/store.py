"""
Template Store — filesystem-backed catalog of categories and templates.

Every query re-reads the tree; nothing is cached.

Each boundary crossing is checked first (exists, is a directory/file, is
readable) so that absence, permission and type mismatch collapse into a
small set of codes:
- NOT_FOUND: path absent or unreadable (including vanishing mid-query)
- NOT_DIR: path exists but is not a directory
- IO_ERROR: any other OS-level failure, or content that is not UTF-8
- UNEXPECTED_ERROR: a bug; logged with traceback

The synchronous helpers run in a worker thread via asyncio.to_thread.
"""

import asyncio
import os
import stat
from pathlib import Path
from typing import Literal

from logging_config import logger
from models import (
    CategoriesResult,
    ContentResult,
    IdeasResult,
    StoreErrorCode,
    StoreFailure,
    TemplateIdea,
    TemplatesResult,
)

ContentFormat = Literal["html", "text"]

# Content variant → file name inside a template directory
CONTENT_FILES: dict[str, str] = {
    "html": "content.html",
    "text": "content.txt",
}


def _is_path_component(name: str) -> bool:
    """True if name addresses a direct child, never a parent or nested path."""
    if not name or name in (".", ".."):
        return False
    separators = [sep for sep in (os.sep, os.altsep, "\x00") if sep]
    return not any(sep in name for sep in separators)


def _check_directory(path: Path, label: str) -> StoreFailure | None:
    """Return a failure envelope if path is not a readable directory."""
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"{label} not found at path: {path}")
    except PermissionError:
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"{label} is not readable: {path}")
    except OSError as e:
        return StoreFailure(StoreErrorCode.IO_ERROR, f"Could not access {label.lower()} {path}: {e.strerror or e}")

    if not stat.S_ISDIR(st.st_mode):
        return StoreFailure(StoreErrorCode.NOT_DIR, f"{label} is not a directory: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"{label} is not readable: {path}")
    return None


def _list_subdirectories(path: Path, label: str) -> list[str] | StoreFailure:
    """Names of immediate subdirectories, in directory listing order."""
    failure = _check_directory(path, label)
    if failure is not None:
        return failure

    try:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if entry.is_dir()]
    except FileNotFoundError:
        # Removed between check and listing
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"{label} not found at path: {path}")
    except PermissionError:
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"{label} is not readable: {path}")
    except NotADirectoryError:
        return StoreFailure(StoreErrorCode.NOT_DIR, f"{label} is not a directory: {path}")
    except OSError as e:
        return StoreFailure(StoreErrorCode.IO_ERROR, f"Could not list {label.lower()} {path}: {e.strerror or e}")


def _list_categories_sync(base_path: Path) -> CategoriesResult | StoreFailure:
    names = _list_subdirectories(base_path, "Template directory")
    if isinstance(names, StoreFailure):
        return names
    return CategoriesResult(categories=names)


def _list_templates_sync(base_path: Path, category: str) -> TemplatesResult | StoreFailure:
    if not _is_path_component(category):
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"Invalid category name: {category!r}")
    names = _list_subdirectories(base_path / category, f"Category '{category}'")
    if isinstance(names, StoreFailure):
        return names
    return TemplatesResult(templates=names)


def _read_content_sync(
    base_path: Path,
    category: str,
    template: str,
    fmt: str,
) -> ContentResult | StoreFailure:
    file_name = CONTENT_FILES.get(fmt)
    if file_name is None:
        return StoreFailure(StoreErrorCode.NOT_FOUND, f"Unsupported content format: {fmt!r}")
    if not _is_path_component(category) or not _is_path_component(template):
        return StoreFailure(
            StoreErrorCode.NOT_FOUND,
            f"Invalid template reference: {category!r}/{template!r}",
        )

    path = base_path / category / template / file_name
    not_found = StoreFailure(
        StoreErrorCode.NOT_FOUND,
        f"Template {fmt} content not found for '{template}' in category '{category}'",
    )

    try:
        if not path.is_file() or not os.access(path, os.R_OK):
            return not_found
        data = path.read_bytes()
    except (FileNotFoundError, NotADirectoryError, IsADirectoryError, PermissionError):
        # Vanished or changed type between check and read
        return not_found
    except OSError as e:
        return StoreFailure(StoreErrorCode.IO_ERROR, f"Could not read {path}: {e.strerror or e}")

    try:
        return ContentResult(content=data.decode("utf-8"))
    except UnicodeDecodeError:
        return StoreFailure(StoreErrorCode.IO_ERROR, f"Template content is not valid UTF-8: {path}")


def _unexpected(operation: str, error: Exception) -> StoreFailure:
    logger.error(f"Unexpected error while {operation}: {error}", exc_info=error)
    return StoreFailure(StoreErrorCode.UNEXPECTED_ERROR, f"Unexpected error while {operation}")


async def list_categories(base_path: str | Path) -> CategoriesResult | StoreFailure:
    """
    List template categories (immediate subdirectories of base_path).

    Files are excluded; order is the filesystem's listing order.
    """
    try:
        return await asyncio.to_thread(_list_categories_sync, Path(base_path))
    except Exception as e:
        return _unexpected("listing template categories", e)


async def list_templates_in_category(
    base_path: str | Path,
    category_name: str,
) -> TemplatesResult | StoreFailure:
    """List templates (subdirectories) of one category."""
    try:
        return await asyncio.to_thread(_list_templates_sync, Path(base_path), category_name)
    except Exception as e:
        return _unexpected(f"listing templates in category '{category_name}'", e)


async def get_template_content(
    base_path: str | Path,
    category_name: str,
    template_name: str,
    format: str = "html",
) -> ContentResult | StoreFailure:
    """
    Read one content variant of a template as UTF-8 text.

    Args:
        base_path: Template library root
        category_name: Category directory name
        template_name: Template directory name
        format: 'html' (content.html) or 'text' (content.txt)

    Returns:
        ContentResult with the file text, or StoreFailure (NOT_FOUND when the
        variant does not exist)
    """
    try:
        return await asyncio.to_thread(
            _read_content_sync, Path(base_path), category_name, template_name, format,
        )
    except Exception as e:
        return _unexpected(f"reading template '{template_name}' in category '{category_name}'", e)


async def get_template_ideas(base_path: str | Path, topic: str) -> IdeasResult | StoreFailure:
    """
    Find templates whose name contains topic (case-insensitive).

    A failure to list the base directory is returned as-is. A category that
    fails to list contributes no ideas and the search continues.

    Ordering follows category listing order, then template listing order.
    """
    try:
        topic_lower = topic.lower()

        categories = await list_categories(base_path)
        if isinstance(categories, StoreFailure):
            return categories

        ideas: list[TemplateIdea] = []
        for category in categories.categories:
            templates = await list_templates_in_category(base_path, category)
            if isinstance(templates, StoreFailure):
                logger.debug(f"Skipping category '{category}': {templates.message}")
                continue
            ideas.extend(
                TemplateIdea(category=category, template=name)
                for name in templates.templates
                if topic_lower in name.lower()
            )

        return IdeasResult(ideas=ideas)
    except Exception as e:
        return _unexpected(f"searching template ideas for topic '{topic}'", e)
