from __future__ import annotations

import json

import pytest

from usdx_parser.config import DEFAULT_REQUIRED_TAGS, ParserConfig, load_config
from usdx_parser.errors import TagValueError
from usdx_parser.txt.classify import DEFAULT_SIGILS
from usdx_parser.txt.model import NoteKind
from usdx_parser.txt.parse import parse_song
from usdx_parser.txt.tags import DEFAULT_TAG_TYPES, TagType


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.delenv("USDX_PARSER_LENIENT", raising=False)
    monkeypatch.delenv("USDX_PARSER_REQUIRED_TAGS", raising=False)


def _write_config(tmp_path, data) -> None:
    d = tmp_path / "usdx-parser"
    d.mkdir(parents=True, exist_ok=True)
    (d / "config.json").write_text(json.dumps(data), encoding="utf-8")


class TestLoadConfig:
    def test_defaults(self):
        cfg = load_config()
        assert cfg.required_tags == DEFAULT_REQUIRED_TAGS
        assert cfg.lenient is False
        assert cfg == ParserConfig()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("USDX_PARSER_LENIENT", "1")
        monkeypatch.setenv("USDX_PARSER_REQUIRED_TAGS", "title, bpm")
        cfg = load_config()
        assert cfg.lenient is True
        assert cfg.required_tags == ("TITLE", "BPM")

    def test_empty_required_list_disables_check(self, monkeypatch):
        monkeypatch.setenv("USDX_PARSER_REQUIRED_TAGS", "")
        assert load_config().required_tags == ()

    def test_dialect_from_config_file(self, tmp_path):
        _write_config(tmp_path, {"sigils": {"g": "golden_rap"}, "tags": {"rating": "int", "bad": "nope"}})
        cfg = load_config()
        assert cfg.sigils["g"] is NoteKind.GOLDEN_RAP
        assert cfg.sigils[":"] is NoteKind.NORMAL
        assert cfg.tag_types["RATING"] is TagType.INT
        assert "BAD" not in cfg.tag_types

    def test_broken_config_file_is_ignored(self, tmp_path):
        d = tmp_path / "usdx-parser"
        d.mkdir()
        (d / "config.json").write_text("{not json", encoding="utf-8")
        assert load_config() == ParserConfig()

    @pytest.mark.parametrize(
        "data",
        [
            {"sigils": ["g"]},
            {"tags": "RATING"},
            {"sigils": 3, "tags": ["x"]},
            ["not", "an", "object"],
        ],
    )
    def test_non_object_sections_are_ignored(self, tmp_path, data):
        _write_config(tmp_path, data)
        assert load_config() == ParserConfig()

    def test_bad_section_does_not_drop_good_one(self, tmp_path):
        _write_config(tmp_path, {"sigils": ["g"], "tags": {"rating": "int"}})
        cfg = load_config()
        assert cfg.sigils == ParserConfig().sigils
        assert cfg.tag_types["RATING"] is TagType.INT


class TestDialectExtension:
    def test_extra_sigil(self):
        cfg = ParserConfig().with_sigils({"g": NoteKind.GOLDEN_RAP})
        song = parse_song("#ARTIST:A\n#TITLE:T\n#BPM:100\ng 0 1 0 yo\n", cfg)
        assert song.notes[0].kind is NoteKind.GOLDEN_RAP

    def test_extra_tag_type(self):
        cfg = ParserConfig().with_tag_types({"rating": TagType.INT})
        with pytest.raises(TagValueError):
            parse_song("#ARTIST:A\n#TITLE:T\n#BPM:100\n#RATING:x\n: 0 1 0 a\n", cfg)

    def test_defaults_are_not_shared(self):
        cfg = ParserConfig().with_sigils({"g": NoteKind.GOLDEN_RAP})
        assert "g" not in ParserConfig().sigils
        assert "g" in cfg.sigils

    def test_tables_are_read_only(self):
        cfg = ParserConfig()
        with pytest.raises(TypeError):
            cfg.sigils["g"] = NoteKind.GOLDEN_RAP
        with pytest.raises(TypeError):
            DEFAULT_SIGILS["g"] = NoteKind.GOLDEN_RAP
        with pytest.raises(TypeError):
            DEFAULT_TAG_TYPES["RATING"] = TagType.INT
        assert "g" not in ParserConfig().sigils

    def test_caller_tables_are_copied(self):
        sigils = {":": NoteKind.NORMAL}
        cfg = ParserConfig(sigils=sigils)
        sigils["g"] = NoteKind.GOLDEN_RAP
        assert "g" not in cfg.sigils
