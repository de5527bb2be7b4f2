"""HTML template store: reads page templates and splices in the shared header and footer."""

import logging
from string import Template
from typing import Dict, Mapping

from .errors import ConfigurationError
from .storage import FileStore

logger = logging.getLogger(__name__)

HEADER_FILE = "templateHeader.html"
FOOTER_FILE = "templateFooter.html"
REQUIRED_TEMPLATES = ("BANK", "COUNTRY", "HOMEPAGE")


def _is_partial(filename: str) -> bool:
    lower = filename.lower()
    return "header" in lower or "footer" in lower


def substitute(template: str, values: Mapping[str, object]) -> str:
    """Replace every $placeholder found in values; unknown placeholders are left as-is."""
    return Template(template).safe_substitute({k: str(v) for k, v in values.items()})


def prepare_templates(files: Mapping[str, str]) -> Dict[str, str]:
    """Turn {filename: content} into {NAME: content} with header/footer spliced in."""
    header = files.get(HEADER_FILE, "")
    footer = files.get(FOOTER_FILE, "")
    templates = {}
    for filename, content in files.items():
        if _is_partial(filename) or not filename.endswith(".html"):
            continue
        name = filename.split(".", 1)[0].upper()
        templates[name] = substitute(content, {"header": header, "footer": footer})

    missing = [name for name in REQUIRED_TEMPLATES if name not in templates]
    if missing:
        raise ConfigurationError(f"Missing templates: {', '.join(missing)}")
    return templates


def load_templates(store: FileStore) -> Dict[str, str]:
    files = {key: store.read(key) for key in store.keys()}
    if not files:
        raise ConfigurationError(f"No templates found in {store.root}")
    templates = prepare_templates(files)
    logger.debug("Loaded templates: %s", ", ".join(sorted(templates)))
    return templates
