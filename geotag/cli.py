"""CLI interface for geotag -- locate and info subcommands."""

import json
import sys
from pathlib import Path

import click

import geotag
from geotag.batch import collect_image_files, locate_batch
from geotag.config import LocatorConfig
from geotag.errors import GeotagError
from geotag.extract import coordinates_from_tiff, open_tiff, read_leading_bytes
from geotag.log import (
    cli_dim,
    cli_error,
    cli_header,
    cli_progress,
    cli_separator,
    cli_success,
    cli_warning,
    log_error,
    log_info,
    log_warn,
)
from geotag.tiff.exif import read_capture_time
from geotag.tiff.gps import gps_tag_name, read_gps_directory

REASON_TEXT = {
    'not_jpeg': 'not a JPEG',
    'no_exif': 'no Exif data',
    'bad_header': 'corrupt TIFF header',
    'truncated': 'truncated metadata',
    'no_gps': 'no GPS position',
    'bad_reference': 'invalid hemisphere reference',
    'bad_value_type': 'unexpected GPS value type',
}


def _format_coords(coords) -> str:
    return f'{coords.lat:.6f}, {coords.lng:.6f}'


@click.group()
@click.version_option(version=geotag.__version__, prog_name='geotag')
def main():
    """geotag -- read GPS positions from JPEG photos.

    Extracts the latitude and longitude recorded in a photo's Exif
    metadata, for seeding berth and object locations.
    """
    pass


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show photos without a position and why.')
@click.option('--json-out', type=click.Path(), help='Write results as JSON to file.')
@click.option('--workers', '-w', type=int, default=None,
              help='Number of parallel workers (default: from config, 1).')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON settings file (scan_window, extensions, workers).')
@click.option('--log', type=click.Path(), help='Write log to file.')
def locate(path, verbose, json_out, workers, config_path, log):
    """Extract GPS coordinates from photos.

    PATH can be a single file or a directory to search recursively.
    """
    input_path = Path(path)
    config = LocatorConfig.from_json(config_path) if config_path else LocatorConfig.default()

    files = collect_image_files(input_path, config.extensions)
    if not files:
        click.echo(f'No image files found in {input_path}')
        return

    log_file = open(log, 'w') if log else None

    def write_log(line):
        if log_file:
            log_file.write(line + '\n')
            log_file.flush()

    click.echo(cli_header(f'geotag v{geotag.__version__} -- '
                          f'locating {len(files)} file(s)...'))

    def progress(i, total, filepath, result):
        prefix = cli_progress(i, total, filepath.name)
        if result.error:
            click.echo(cli_error(f'{prefix} -- ERROR: {result.error}'))
            write_log(log_error(f'{filepath}: {result.error}'))
        elif result.located:
            click.echo(cli_success(f'{prefix} -- {_format_coords(result.coordinates)}'))
            write_log(log_info(f'{filepath}: {_format_coords(result.coordinates)}'))
        else:
            reason = REASON_TEXT.get(result.reason, result.reason)
            if verbose:
                click.echo(cli_warning(f'{prefix} -- skipped ({reason})'))
            write_log(log_warn(f'{filepath}: skipped ({reason})'))

    batch = locate_batch(input_path, config=config,
                         progress_callback=progress, workers=workers)

    click.echo(f'\nDone in {batch.total_time_seconds:.1f}s')
    click.echo(f'  Total:       {batch.total_files}')
    click.echo(f'  Located:     {batch.files_located}')
    click.echo(f'  Skipped:     {batch.files_without_gps}')
    click.echo(f'  Errors:      {batch.files_errored}')

    if json_out:
        results_json = []
        for result in batch.results:
            results_json.append({
                'file': str(result.filepath),
                'lat': result.coordinates.lat if result.located else None,
                'lng': result.coordinates.lng if result.located else None,
                'taken_at': result.taken_at.isoformat() if result.taken_at else None,
                'reason': result.reason,
                'error': result.error,
            })
        with open(json_out, 'w') as f:
            json.dump(results_json, f, indent=2)
        click.echo(cli_dim(f'Results written to {json_out}'))

    if log_file:
        log_file.close()

    if batch.files_errored > 0:
        sys.exit(1)


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
def info(path):
    """Show the Exif/GPS structure of a single photo."""
    filepath = Path(path)
    data = read_leading_bytes(filepath)

    click.echo(f'File: {filepath.name}')
    click.echo(f'Size: {filepath.stat().st_size} bytes')

    try:
        view, segment, ctx, root_entries = open_tiff(data)
    except GeotagError as e:
        click.echo(cli_warning(f'Exif: {REASON_TEXT[e.reason]} ({e})'))
        return

    click.echo(f'Exif segment: offset {segment.offset}, {segment.length} bytes')
    click.echo(f'Byte order: {ctx.byte_order.name.lower()}-endian')
    click.echo(f'IFD0: {len(root_entries)} entries')
    click.echo(cli_separator())

    try:
        gps_entries = read_gps_directory(view, ctx, root_entries)
    except GeotagError as e:
        click.echo(cli_warning(f'GPS: {REASON_TEXT[e.reason]} ({e})'))
        return

    click.echo(f'GPS IFD: {len(gps_entries)} entries')
    for entry in gps_entries:
        click.echo(f'  {gps_tag_name(entry.tag_id)} (type {entry.dtype}, '
                   f'count {entry.count})')

    try:
        coords = coordinates_from_tiff(view, ctx, root_entries)
    except GeotagError as e:
        click.echo(cli_warning(f'\nPosition: {REASON_TEXT[e.reason]} ({e})'))
        return

    click.echo(cli_success(f'\nPosition: {_format_coords(coords)}'))
    taken_at = read_capture_time(view, ctx, root_entries)
    if taken_at is not None:
        click.echo(f'Taken at: {taken_at.isoformat(sep=" ")}')


if __name__ == '__main__':
    main()
