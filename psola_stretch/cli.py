"""
Command Line Interface for psola-stretch.

Usage:
    psola-stretch adjust 1.5 input.wav output.wav
    psola-stretch adjust 0.5 input.wav output.wav --voice low
    psola-stretch info input.wav
"""

import logging
import sys
from pathlib import Path

import click

from .core.config import VOICE_RANGES, LEGACY_CLIP_RANGE, FULL_CLIP_RANGE, StretchConfig
from .core.errors import ConfigurationError, InputError, InvariantViolation

# Exit code for a broken engine invariant (1 = input, 2 = usage/config)
EXIT_INVARIANT = 3


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """PSOLA-Stretch: change speech speed without changing pitch."""
    pass


@cli.command()
@click.argument('speed', type=float)
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_file', type=click.Path(dir_okay=False))
@click.option('--voice', type=click.Choice(sorted(VOICE_RANGES)), default='default',
              help='Expected pitch range preset (default: 65-400 Hz)')
@click.option('--min-freq', type=float, default=None,
              help='Lowest expected pitch in Hz (overrides --voice)')
@click.option('--max-freq', type=float, default=None,
              help='Highest expected pitch in Hz (overrides --voice)')
@click.option('--step', 'step_policy', type=click.Choice(['full', 'half']), default='full',
              help='Advance a full or half period per frame (default: full)')
@click.option('--precision', type=click.Choice(['double', 'single']), default='double',
              help='Float precision for synthesis (default: double)')
@click.option('--legacy-clip', is_flag=True,
              help='Clamp output to +/-32767 instead of the full 16-bit range')
@click.option('-v', '--verbose', is_flag=True, help='Show detailed output')
def adjust(speed, input_file, output_file, voice, min_freq, max_freq,
           step_policy, precision, legacy_clip, verbose):
    """Play INPUT_FILE at SPEED (2.0 = twice as fast) into OUTPUT_FILE."""
    from psola_stretch import PsolaStretcher

    _setup_logging(verbose)

    config = StretchConfig.for_voice(
        voice, speed,
        step_policy=step_policy,
        precision=precision,
        clip_range=LEGACY_CLIP_RANGE if legacy_clip else FULL_CLIP_RANGE,
    )
    if min_freq is not None:
        config.min_voice_freq = min_freq
    if max_freq is not None:
        config.max_voice_freq = max_freq

    try:
        stretcher = PsolaStretcher(config=config)
    except ConfigurationError as e:
        raise click.UsageError(str(e))

    input_path = Path(input_file)
    output_path = Path(output_file)

    try:
        result, report = stretcher.stretch_file(input_path, output_path)
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    except InputError as e:
        raise click.ClickException(str(e))
    except InvariantViolation as e:
        click.echo(f"❌ Internal error: {e}", err=True)
        sys.exit(EXIT_INVARIANT)

    if verbose:
        click.echo(f"📁 Input: {input_path}")
        click.echo(f"🎯 Speed: {speed:g}x")
        click.echo(f"\n✅ Result: {report.input_duration:.3f}s → {report.output_duration:.3f}s")
        click.echo(f"📈 Steps: {report.steps} ({report.voiced_ratio * 100:.0f}% voiced)")
        click.echo(f"🔧 Period: {report.min_period}-{report.max_period} samples "
                   f"(mean {report.mean_period:.1f})")
        click.echo(f"🎵 Output: {report.sample_rate}Hz | {report.channels}ch")
        click.echo(f"💾 Saved: {output_path}")
        for w in report.warnings:
            click.echo(f"⚠️  {w}")
    else:
        click.echo(f"✅ {report.input_duration:.2f}s → {report.output_duration:.2f}s "
                   f"({speed:g}x) | Voiced: {report.voiced_ratio * 100:.0f}%")
        click.echo(f"💾 {output_path}")


@cli.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--voice', type=click.Choice(sorted(VOICE_RANGES)), default='default',
              help='Pitch range preset used for the period bounds')
def info(input_file, voice):
    """Show audio file information and PSOLA period bounds."""
    from psola_stretch.analyzer.audio import AudioAnalyzer

    input_path = Path(input_file)

    try:
        file_info = AudioAnalyzer.get_info(input_path)
        bounds = StretchConfig.for_voice(voice, 1.0).bounds_for(file_info['sample_rate'])
    except ConfigurationError as e:
        raise click.UsageError(str(e))
    except InputError as e:
        raise click.ClickException(str(e))

    click.echo(f"📊 {input_path.name}: {file_info['duration']:.2f}s | "
               f"{file_info['sample_rate']}Hz | {file_info['channels']}ch")
    click.echo(f"Length = {file_info['frames']}, sample rate = {file_info['sample_rate']} Hz")
    click.echo(f"🔍 Period bounds ({voice}): {bounds.min_period}-{bounds.max_period} samples")


@cli.command()
@click.option('-h', '--host', default='0.0.0.0', help='Host to bind')
@click.option('-p', '--port', default=8000, help='Port to bind')
def serve(host, port):
    """Start the REST API server."""
    try:
        import uvicorn
        from psola_stretch.api import app
    except ImportError:
        click.echo("❌ API dependencies not installed. Run: pip install psola-stretch[api]")
        sys.exit(1)

    click.echo(f"🚀 Starting API server on http://{host}:{port}")
    uvicorn.run(app, host=host, port=port)


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # Per-step records are too chatty even for -v
    logging.getLogger("psola_stretch.core.engine").setLevel(logging.INFO)


def main():
    cli()


if __name__ == '__main__':
    main()
