from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from usdx_parser.txt.classify import DEFAULT_SIGILS
from usdx_parser.txt.model import NoteKind
from usdx_parser.txt.tags import DEFAULT_TAG_TYPES, TagType

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_TAGS: tuple[str, ...] = ("ARTIST", "TITLE", "BPM")


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "usdx-parser"
    return Path.home() / ".config" / "usdx-parser"


@dataclass(frozen=True)
class ParserConfig:
    # Validation
    required_tags: tuple[str, ...] = DEFAULT_REQUIRED_TAGS
    lenient: bool = False  # skip unrecognized lines with a warning

    # Dialect tables
    sigils: Mapping[str, NoteKind] = field(default_factory=lambda: DEFAULT_SIGILS)
    tag_types: Mapping[str, TagType] = field(default_factory=lambda: DEFAULT_TAG_TYPES)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sigils", MappingProxyType(dict(self.sigils)))
        object.__setattr__(self, "tag_types", MappingProxyType(dict(self.tag_types)))

    def with_sigils(self, extra: Mapping[str, NoteKind]) -> "ParserConfig":
        return replace(self, sigils={**self.sigils, **extra})

    def with_tag_types(self, extra: Mapping[str, TagType]) -> "ParserConfig":
        return replace(self, tag_types={**self.tag_types, **{k.upper(): v for k, v in extra.items()}})


def load_config() -> ParserConfig:
    """
    Defaults, then env (USDX_PARSER_LENIENT, USDX_PARSER_REQUIRED_TAGS),
    then dialect extensions from config.json.
    """
    lenient = os.getenv("USDX_PARSER_LENIENT", "0") not in ("0", "false", "False", "")

    required_env = os.getenv("USDX_PARSER_REQUIRED_TAGS")
    if required_env is None:
        required = DEFAULT_REQUIRED_TAGS
    else:
        required = tuple(s.strip().upper() for s in required_env.split(",") if s.strip())

    cfg = ParserConfig(required_tags=required, lenient=lenient)
    sigils, tag_types = _load_dialect(_config_dir())
    if sigils:
        cfg = cfg.with_sigils(sigils)
    if tag_types:
        cfg = cfg.with_tag_types(tag_types)
    return cfg


def _load_dialect(config_dir: Path) -> tuple[dict[str, NoteKind], dict[str, TagType]]:
    cfg_path = config_dir / "config.json"
    if not cfg_path.exists():
        return {}, {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}, {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a JSON object", cfg_path)
        return {}, {}

    sigils: dict[str, NoteKind] = {}
    for sigil, kind in _section(data, "sigils", cfg_path).items():
        try:
            sigils[str(sigil)] = NoteKind(str(kind).lower())
        except ValueError:
            logger.warning("Unknown note kind %r for sigil %r in %s", kind, sigil, cfg_path)

    tag_types: dict[str, TagType] = {}
    for key, typ in _section(data, "tags", cfg_path).items():
        try:
            tag_types[str(key).upper()] = TagType(str(typ).lower())
        except ValueError:
            logger.warning("Unknown tag type %r for #%s in %s", typ, key, cfg_path)
    return sigils, tag_types


def _section(data: dict, name: str, cfg_path: Path) -> dict:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Ignoring %r in %s: expected a JSON object", name, cfg_path)
        return {}
    return value
