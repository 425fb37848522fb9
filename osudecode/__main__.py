import logging

import click

from . import Beatmap
from .cli import format_summary, maybe_show_progress
from .diagnostics import ignore_diagnostic, log_diagnostic


@click.group()
def main():
    """osudecode utilities.
    """
    logging.basicConfig(format='%(levelname)s %(name)s: %(message)s')


@main.command()
@click.argument(
    'beatmaps',
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False),
)
@click.option(
    '--progress/--no-progress',
    help='Show a progress bar?',
    default=False,
)
@click.option(
    '--skip-exceptions/--no-skip-exceptions',
    help='Skip beatmap files that cause exceptions rather than exiting?',
    default=False,
)
@click.option(
    '--warnings/--no-warnings',
    help='Log non-fatal problems found while decoding?',
    default=True,
)
def summary(beatmaps, progress, skip_exceptions, warnings):
    """Decode ``.osu`` files and print a summary of each.
    """
    diagnostics = log_diagnostic if warnings else ignore_diagnostic

    summaries = []
    with maybe_show_progress(
            beatmaps,
            progress,
            label='Decoding beatmaps: ',
    ) as it:
        for path in it:
            try:
                beatmap = Beatmap.from_path(path, diagnostics=diagnostics)
            except ValueError as e:
                if skip_exceptions:
                    logging.exception(f'Failed to decode "{path}"')
                    continue
                raise click.ClickException(
                    f'Failed to decode "{path}": {e}. '
                    'Use --skip-exceptions to skip this file and continue.'
                )
            summaries.append(format_summary(beatmap))

    for text in summaries:
        click.echo(text)


if __name__ == '__main__':
    main()
