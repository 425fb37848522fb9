from importlib.resources import files

from osudecode import Beatmap


def example_beatmap(name, **kwargs):
    """Load one of the example beatmaps.

    Parameters
    ----------
    name : str
        The name of the example file to open.
    **kwargs
        Forwarded to :meth:`osudecode.Beatmap.from_file`.
    """
    with files(__name__).joinpath(name).open(encoding='utf-8-sig') as f:
        return Beatmap.from_file(f, **kwargs)


def example_song(**kwargs):
    """Load the Example Song beatmap, a small modern (v14) map.

    Returns
    -------
    example_song : Beatmap
        The beatmap object.
    """
    return example_beatmap(
        'Example Artist - Example Song (mapper) [Normal].osu',
        **kwargs,
    )


def old_song(**kwargs):
    """Load the Old Song beatmap, a v3 map without an ``ApproachRate``.

    Returns
    -------
    old_song : Beatmap
        The beatmap object.
    """
    return example_beatmap(
        'Old Artist - Old Song (veteran) [Easy].osu',
        **kwargs,
    )
