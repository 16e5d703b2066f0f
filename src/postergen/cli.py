"""CLI interface for the poster generator."""

import logging
from pathlib import Path

import click

from postergen.builder import render_poster_file
from postergen.config import PosterConfig, load_config
from postergen.fonts import FontNotFoundError, FontResolver
from postergen.fonts.system import SystemFontCatalog

LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


@click.group()
@click.version_option()
@click.option("-v", "--verbose", count=True, help="Increase log output (-v info, -vv debug).")
def main(verbose: int) -> None:
    """Render markup text files into poster images."""
    logging.basicConfig(
        level=LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)],
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option(
    "-i",
    "--input-path",
    type=click.Path(path_type=Path),
    required=True,
    help="UTF-8 markup file to render.",
)
@click.option(
    "-o",
    "--output-path",
    type=click.Path(path_type=Path),
    required=True,
    help="Output image path. The format follows the extension (.png, .jpg, ...).",
)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a TOML config file. Command line options override it.",
)
@click.option("--image-width", type=int, help="Image width in pixels (default: 1920).")
@click.option("--image-height", type=int, help="Image height in pixels (default: 1080).")
@click.option("--padding", type=int, help="Padding on every side in pixels (default: 300).")
@click.option("--background-color", type=str, help="Background CSS color (default: #FFFFFFFF).")
@click.option("--line-spacing", type=float, help="Line spacing factor (default: 1.5).")
@click.option("--default-family", type=str, help="Fallback font family.")
def render(
    input_path: Path,
    output_path: Path,
    config: Path | None,
    image_width: int | None,
    image_height: int | None,
    padding: int | None,
    background_color: str | None,
    line_spacing: float | None,
    default_family: str | None,
) -> None:
    """
    Render a markup file into an image.

    Supported markup: <l>, <r>, <c> for alignment, <br> or a newline for a
    line break, and <font size color background family weight style>.
    """
    try:
        cfg = load_config(config) if config else PosterConfig()

        overrides = {
            "image_width": image_width,
            "image_height": image_height,
            "padding": padding,
            "background_color": background_color,
            "line_spacing": line_spacing,
            "default_family": default_family,
        }
        updates = {key: value for key, value in overrides.items() if value is not None}
        if updates:
            # Re-validate rather than model_copy(), which skips validation
            cfg = PosterConfig(**{**cfg.model_dump(), **updates})

        resolver = FontResolver(SystemFontCatalog(), default_family=cfg.default_family)
        render_poster_file(input_path, output_path, cfg, resolver)

        click.echo(f"✓ Poster saved to: {output_path}")

    except FontNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Available fonts:", err=True)
        for name in e.available_families:
            click.echo(f"- {name}", err=True)
        raise SystemExit(1)
    except (OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)


@main.command()
def fonts() -> None:
    """List installed font families."""
    families = SystemFontCatalog().all_families()
    if not families:
        click.echo("No fonts found. Is fontconfig (fc-list) installed?", err=True)
        raise SystemExit(1)
    for name in families:
        click.echo(name)


if __name__ == "__main__":
    main()
