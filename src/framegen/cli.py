"""Click-based CLI entry point with unified subcommands."""

import json
import os
import sys
import click

from .errors import FrameGenError
from .pipeline import FrameAnalyzer
from .presets import PRESETS, apply_preset
from .regions import Region
from .utils import ensure_directory
from . import defaults, __version__


def parse_crop(ctx, param, value):
    """Click callback turning 'x,y,w,h' (normalized) into a Region."""
    if value is None:
        return None
    try:
        x, y, w, h = (float(v) for v in value.split(','))
    except ValueError:
        raise click.BadParameter("expected four comma-separated numbers: x,y,width,height")
    if w <= 0 or h <= 0:
        raise click.BadParameter("crop width and height must be positive")
    return Region(x=x, y=y, width=w, height=h)


def parse_size(ctx, param, value):
    """Click callback turning 'WIDTHxHEIGHT' (pixels) into a tuple."""
    if value is None:
        return None
    try:
        width, height = (int(v) for v in value.lower().split('x'))
    except ValueError:
        raise click.BadParameter("expected image size as WIDTHxHEIGHT, e.g. 1920x1080")
    if width <= 0 or height <= 0:
        raise click.BadParameter("image width and height must be positive")
    return width, height


def echo_report(report, verbose):
    """Print a human-readable summary of an ImageReport."""
    composition = report.composition
    click.secho(f"Overall score: {composition.overall_score:.2f}", bold=True)
    click.echo(f"  Technical:   {composition.technical_score:.2f}")
    click.echo(f"  Artistic:    {composition.artistic_score:.2f}")
    click.echo(f"  Composition: {composition.composition_score:.2f}")

    if verbose and composition.breakdown:
        for rule, score in composition.breakdown.to_dict().items():
            if rule != 'overall':
                click.echo(f"    {rule:<15} {score:.2f}")

    for strength in composition.strengths:
        click.secho(f"  + {strength}", fg='green')
    for weakness in composition.weaknesses:
        click.secho(f"  - {weakness}", fg='yellow')
    for suggestion in composition.suggestions:
        click.echo(f"  * {suggestion}")

    click.echo()
    click.echo(f"Brightness: {report.brightness:.2f}  Harmony: {report.color_harmony:.2f}  "
               f"Mood: {report.mood:.2f}")
    click.echo("Dominant colors: " + ", ".join(
        f"{c.hex} ({c.share:.0%})" for c in report.dominant_colors
    ))
    click.echo(f"Regions of interest: {len(report.regions_of_interest)}  "
               f"Subjects: {len(report.subjects.subjects)}")
    if report.guide_score is not None:
        click.echo(f"Guide score: {report.guide_score:.0f}/100")

    click.echo()
    click.secho("Crop suggestions:", bold=True)
    for suggestion in report.crop_suggestions:
        crop = suggestion.crop
        click.echo(f"  {suggestion.score:5.1f}  {suggestion.name:<24} "
                   f"x={crop.x:.3f} y={crop.y:.3f} w={crop.width:.3f} h={crop.height:.3f}")


@click.group()
@click.version_option(version=__version__)
def cli():
    """FrameGen composition analysis - scores composition and suggests crops."""
    pass


@cli.command()
@click.option('--input', '-i', required=True, type=click.Path(exists=True),
              help='Input image file path')
@click.option('--crop', callback=parse_crop, default=None,
              help='Candidate crop as normalized x,y,width,height')
@click.option('--json', 'json_path', type=click.Path(),
              help='Write the full report as JSON to this path')
@click.option('--max-size', default=defaults.ANALYSIS_MAX_SIZE, type=int,
              help=f'Longest side for analysis, 0 for full size (default: {defaults.ANALYSIS_MAX_SIZE})')
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
def analyze(input, crop, json_path, max_size, verbose):
    """Analyze the composition of a single image."""
    analyzer = FrameAnalyzer(max_size=max_size)

    if verbose:
        click.echo(f"Analyzing: {input}")

    result = analyzer.analyze_file(input, crop=crop, verbose=verbose)

    if not result.success:
        click.secho("Failed!", fg='red', bold=True)
        click.echo(f"  Error: {result.error_message}")
        raise click.Abort()

    for warning in result.warnings:
        click.secho(f"Warning: {warning}", fg='yellow')

    echo_report(result.report, verbose)

    if json_path:
        output_dir = os.path.dirname(json_path)
        if output_dir:
            ensure_directory(output_dir)
        with open(json_path, 'w') as f:
            json.dump(result.report.to_dict(), f, indent=2)
        click.echo(f"\nReport: {json_path}")


@cli.command()
@click.option('--input', '-i', required=True, type=click.Path(exists=True),
              help='Input directory containing images')
@click.option('--output', '-o', required=True, type=click.Path(),
              help='Output directory for JSON reports')
@click.option('--workers', default=defaults.WORKERS, type=int,
              help=f'Number of parallel workers (default: {defaults.WORKERS})')
@click.option('--skip-existing', is_flag=True,
              help='Skip images whose report already exists')
@click.option('--recursive', '-r', is_flag=True,
              help='Process subdirectories recursively')
@click.option('--timeout', default=None, type=float,
              help='Overall time budget in seconds; unfinished images are cancelled')
@click.option('--max-size', default=defaults.ANALYSIS_MAX_SIZE, type=int,
              help=f'Longest side for analysis (default: {defaults.ANALYSIS_MAX_SIZE})')
def batch(input, output, workers, skip_existing, recursive, timeout, max_size):
    """Batch analyze a directory of images."""
    from .batch import run_batch

    config = {
        'max_size': max_size,
        'skip_existing': skip_existing,
        'recursive': recursive,
        'timeout': timeout,
    }

    sys.exit(run_batch(input, output, config, workers=workers))


@cli.command()
@click.option('--platform', '-p', default=None, help='Preset platform (e.g. instagram)')
@click.option('--format', '-f', 'format_', default=None, help='Preset format (e.g. portrait)')
@click.option('--crop', callback=parse_crop, default=None,
              help='Crop to reshape as normalized x,y,width,height')
@click.option('--size', '-s', callback=parse_size, default=None,
              help='Image size as WIDTHxHEIGHT so the aspect applies in pixels')
def presets(platform, format_, crop, size):
    """List aspect presets, or apply one to a crop."""
    if platform is None:
        for name, formats in PRESETS.items():
            click.secho(name, bold=True)
            for key, preset in formats.items():
                click.echo(f"  {key:<10} {preset.width:g}:{preset.height:g}  {preset.name}")
        return

    if crop is None:
        crop = Region(x=0.0, y=0.0, width=1.0, height=1.0)

    image_width, image_height = size or (1, 1)
    try:
        result = apply_preset(crop, platform, format_ or '',
                              image_width=image_width, image_height=image_height)
    except FrameGenError as e:
        click.secho(f"Error: {e}", fg='red')
        raise click.Abort()

    click.echo(f"x={result.x:.4f} y={result.y:.4f} w={result.width:.4f} h={result.height:.4f}")


if __name__ == '__main__':
    cli()
