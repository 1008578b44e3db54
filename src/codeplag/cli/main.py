"""Command-line interface for codeplag."""

import click
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..chunking import ChunkExtractor
from ..core.config import Config
from ..core.models import ExternalSignals, LocalSignal, StructuralInputs
from ..normalization import CodeNormalizer
from ..scoring import ScoringEngine
from ..utils.output import ReportFormatter


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Setup logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _emit(config: Config, text: str) -> None:
    """Write to the configured output file, or stdout."""
    if config.output.output_file:
        config.output.output_file.write_text(text, encoding='utf-8')
        if not config.output.quiet:
            click.echo(f"Results written to {config.output.output_file}")
    else:
        click.echo(text)


@click.group()
@click.version_option(version='0.1.0')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Configuration file path')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config: Optional[Path]):
    """codeplag - multi-signal source code plagiarism detection."""
    ctx.ensure_object(dict)

    # Setup logging
    setup_logging(verbose, quiet)

    # Load configuration
    if config:
        ctx.obj['config'] = Config.load_from_file(config)
    else:
        # Try to find config file automatically
        config_file = Config.find_config_file()
        if config_file:
            ctx.obj['config'] = Config.load_from_file(config_file)
        else:
            ctx.obj['config'] = Config.get_default_config()

    # Override config with CLI options
    ctx.obj['config'] = ctx.obj['config'].merge_with_cli_args(
        verbose=verbose or None,
        quiet=quiet or None,
    )


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--language', '-l', default='javascript', show_default=True, help='Source language')
@click.option('--windows', is_flag=True, help='Use fixed-size sliding windows instead of functions')
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'json']),
              help='Output format')
@click.pass_context
def chunks(ctx, file: Path, language: str, windows: bool, output_format: Optional[str]):
    """Extract comparison chunks from a source file."""
    config = ctx.obj['config'].merge_with_cli_args(format=output_format)

    try:
        code = file.read_text(encoding='utf-8')
        extractor = ChunkExtractor(config.chunking)

        if windows:
            extracted = extractor.extract_windows(code)
        else:
            extracted = extractor.extract(code, language)

        formatter = ReportFormatter(config.output)
        _emit(config, formatter.format_chunks(extracted))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--language', '-l', default='javascript', show_default=True, help='Source language')
@click.option('--signature', is_flag=True, help='Also print the structural signature')
@click.pass_context
def normalize(ctx, file: Path, language: str, signature: bool):
    """Print the normalized form of a source file."""
    config = ctx.obj['config']

    try:
        code = file.read_text(encoding='utf-8')
        dual = CodeNormalizer().prepare_dual_code(code, language)

        text = dual.normalized
        if signature:
            text = f"{text}\n\n# {dual.semantic_signature}"
        _emit(config, text)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('file_a', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('file_b', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--language', '-l', default='javascript', show_default=True, help='Source language')
@click.option('--format', '-f', 'output_format', type=click.Choice(['table', 'json']),
              help='Output format')
@click.pass_context
def structure(ctx, file_a: Path, file_b: Path, language: str, output_format: Optional[str]):
    """Compare the function decomposition of two files."""
    config = ctx.obj['config'].merge_with_cli_args(format=output_format)

    try:
        penalty = CodeNormalizer().structural_penalty(
            file_a.read_text(encoding='utf-8'),
            file_b.read_text(encoding='utf-8'),
            language,
        )
        _emit(config, ReportFormatter(config.output).format_penalty(penalty))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('signals', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--threshold', '-t', type=click.FloatRange(0.0, 1.0),
              help='Detection threshold (0.0-1.0)')
@click.option('--format', '-f', 'output_format',
              type=click.Choice(['table', 'json', 'markdown']),
              help='Output format')
@click.option('--output', '-o', type=click.Path(path_type=Path),
              help='Output file path')
@click.pass_context
def report(ctx,
           signals: Path,
           threshold: Optional[float],
           output_format: Optional[str],
           output: Optional[Path]):
    """Score a JSON file of detection signals and print the report.

    The file holds a "local" section (max_similarity, has_matches), an
    "external" section with per-tool comparisons (tool, available, results)
    and an optional "structural" section (current_code, compared_code,
    language).
    """
    config = ctx.obj['config'].merge_with_cli_args(
        format=output_format,
        output=output,
        threshold=threshold,
    )

    try:
        data = json.loads(signals.read_text(encoding='utf-8'))
        if not isinstance(data, dict):
            raise click.BadParameter("signals file must hold a JSON object", param_hint="SIGNALS")

        local = LocalSignal.model_validate(data['local']) if data.get('local') is not None else None
        external = ExternalSignals.model_validate(data['external']) if data.get('external') is not None else None
        structural = None
        if data.get('structural') is not None:
            structural = StructuralInputs.model_validate(data['structural'])

        engine = ScoringEngine(config.scoring)
        result = engine.report(local, external, config.scoring.default_threshold, structural)

        formatter = ReportFormatter(config.output)
        _emit(config, formatter.format_report(result))

        # Exit with error code when plagiarism is detected
        if result.plagiarism_detected:
            sys.exit(1)

    except (json.JSONDecodeError, ValidationError) as e:
        click.echo(f"Error: invalid signals file: {e}", err=True)
        sys.exit(2)
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)


@cli.command()
@click.option('--output', '-o', type=click.Path(path_type=Path),
              default=Path('.codeplag.yaml'),
              help='Output configuration file path')
@click.pass_context
def init(ctx, output: Path):
    """Initialize a new configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                click.echo("Cancelled.")
                return

        # Create default configuration
        config = Config.get_default_config()

        # Save to file
        config.save_to_file(output)

        click.echo(f"Configuration file created: {output}")
        click.echo("Edit this file to customize weights, thresholds and collaborators.")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
