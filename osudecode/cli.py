from contextlib import contextmanager

import click


def maybe_show_progress(it, show_progress, **kwargs):
    """Optionally show a progress bar for the given iterator.

    Parameters
    ----------
    it : iterable
        The underlying iterator.
    show_progress : bool
        Should progress be shown.
    **kwargs
        Forwarded to the click progress bar.

    Returns
    -------
    itercontext : context manager
        A context manager whose enter is the actual iterator to use.
    """
    if show_progress:
        return click.progressbar(it, **kwargs)

    @contextmanager
    def ctx():
        yield it

    return ctx()


def _format_float(value):
    if value is None:
        return '-'
    return f'{value:g}'


def format_summary(beatmap):
    """Render the summary printed for a beatmap.

    Parameters
    ----------
    beatmap : Beatmap
        The decoded beatmap.

    Returns
    -------
    summary : str
        The lines of the summary joined with newlines.
    """
    bpm_min = beatmap.bpm_min()
    bpm_max = beatmap.bpm_max()
    if bpm_min == bpm_max:
        bpm = _format_float(bpm_min)
    else:
        bpm = f'{_format_float(bpm_min)}-{_format_float(bpm_max)}'

    return '\n'.join([
        beatmap.display_name,
        f'  mode: {beatmap.mode.short_name}'
        f' (format v{beatmap.format_version})',
        f'  CS {beatmap.circle_size:g}  OD {beatmap.overall_difficulty:g}'
        f'  AR {beatmap.approach_rate:g}  HP {beatmap.hp_drain_rate:g}',
        f'  slider multiplier: {beatmap.slider_multiplier:g}'
        f'  tick rate: {beatmap.slider_tick_rate:g}',
        f'  bpm: {bpm}  timing points: {len(beatmap.timing_points)}',
        f'  circles: {beatmap.count_circles}'
        f'  sliders: {beatmap.count_sliders}'
        f'  spinners: {beatmap.count_spinners}',
    ])
