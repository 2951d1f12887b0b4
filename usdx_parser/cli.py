from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from usdx_parser.config import ParserConfig, load_config
from usdx_parser.errors import IoError, ParseError
from usdx_parser.logging_setup import setup_logging
from usdx_parser.txt.export import export_json, export_txt
from usdx_parser.txt.model import Song
from usdx_parser.txt.parse import ParseStats, parse_song_with_stats, read_song_text


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _config(lenient: bool) -> ParserConfig:
    cfg = load_config()
    if lenient:
        cfg = replace(cfg, lenient=True)
    return cfg


def _read(path: Path, cfg: ParserConfig) -> tuple[Song, ParseStats]:
    try:
        return parse_song_with_stats(read_song_text(path), cfg)
    except (IoError, ParseError) as e:
        typer.echo(f"{path}: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def parse(
    song_path: Path,
    lenient: bool = typer.Option(False, "--lenient", help="Skip unrecognized lines instead of failing"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Parse a USDX song file and print stats."""
    setup_logging(debug)
    song, stats = _read(song_path, _config(lenient))
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"tag_lines={stats.tag_lines}")
    typer.echo(f"note_lines={stats.note_lines}")
    typer.echo(f"line_breaks={stats.line_breaks}")
    typer.echo(f"voice_markers={stats.voice_markers}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"lines_skipped={stats.lines_skipped}")
    typer.echo(f"lines_after_end={stats.lines_after_end}")
    typer.echo(f"voices={[v.index for v in song.voices]}")
    typer.echo(f"notes_total={len(song.notes)}")
    typer.echo(f"tags={dict(song.tags)}")


@app.command()
def export(
    song_path: Path,
    fmt: str = typer.Option("txt", "--format", case_sensitive=False, help="txt|json"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
    lenient: bool = typer.Option(False, "--lenient", help="Skip unrecognized lines instead of failing"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Re-serialize a song as normalized USDX text or JSON."""
    setup_logging(debug)
    fmt_l = fmt.lower()
    if fmt_l not in ("txt", "json"):
        raise typer.BadParameter("format must be one of: txt, json")

    song, _stats = _read(song_path, _config(lenient))
    data = export_json(song) if fmt_l == "json" else export_txt(song)

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
