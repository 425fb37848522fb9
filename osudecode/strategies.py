"""hypothesis strategies which write well-formed ``.osu`` documents.

Each document strategy draws the values of a beatmap, renders them as
``.osu`` text, and returns the text together with the :class:`Beatmap` that
decoding the text should produce.
"""
import string

from hypothesis.strategies import (
    booleans,
    composite,
    floats as _floats,
    integers,
    just,
    lists,
    one_of,
    sampled_from,
    text,
)

from osudecode import (
    Beatmap,
    GameMode,
    HitObject,
    HitObjectType,
    Timing,
    Vector2,
)


def floats(*args, **kwargs):
    # nan never compares equal, which makes expected beatmaps useless
    return _floats(*args, allow_nan=False, allow_infinity=False, **kwargs)


def field_values():
    """Metadata values which survive the trimming done by the decoder.
    """
    return text(
        alphabet=string.ascii_letters + string.digits + "()[]-.!'&",
        max_size=20,
    )


def comment_lines():
    return sampled_from([
        '// a comment',
        ' an indented comment',
        '_an underscore comment',
        '//',
    ])


@composite
def timing_points(draw):
    return Timing(
        time=float(draw(integers(-1000, 600000))),
        ms_per_beat=draw(one_of(floats(1, 2000), floats(-1000, -1))),
        change=draw(booleans()),
    )


def render_timing_point(timing_point):
    return (
        f'{timing_point.time!r},{timing_point.ms_per_beat!r},4,2,1,60,'
        f'{int(timing_point.change)},0'
    )


@composite
def positions(draw):
    return Vector2(draw(integers(0, 512)), draw(integers(0, 384)))


@composite
def circles(draw, time):
    type_ = HitObjectType.pack(circle=True, new_combo=draw(booleans()))
    return HitObject.from_type(time, type_, draw(positions()))


@composite
def sliders(draw, time):
    type_ = HitObjectType.pack(slider=True, new_combo=draw(booleans()))
    return HitObject.from_type(
        time,
        type_,
        draw(positions()),
        repetitions=draw(integers(1, 10)),
        distance=draw(floats(1, 500)),
    )


@composite
def spinners(draw, time):
    type_ = HitObjectType.pack(spinner=True, new_combo=draw(booleans()))
    return HitObject.from_type(time, type_, None)


def render_hit_object(hit_object):
    time = int(hit_object.time)
    if hit_object.is_spinner:
        return f'256,192,{time},{hit_object.type},0,{time + 1000},0:0:0:0:'

    data = hit_object.data
    x = int(data.position.x)
    y = int(data.position.y)
    if hit_object.is_slider:
        return (
            f'{x},{y},{time},{hit_object.type},0,L|{x}:{y},'
            f'{data.repetitions},{data.distance!r},0|0,0:0|0:0,0:0:0:0:'
        )
    return f'{x},{y},{time},{hit_object.type},0,0:0:0:0:'


@composite
def hit_objects(draw):
    times = sorted(draw(lists(integers(0, 600000), max_size=30)))
    return [
        draw(one_of(circles(float(t)), sliders(float(t)), spinners(float(t))))
        for t in times
    ]


@composite
def _record_block(draw, records):
    lines = []
    for record in records:
        if draw(booleans()):
            lines.append(draw(comment_lines()))
        lines.append(record)
    return lines


@composite
def beatmap_documents(draw):
    """A well-formed ``.osu`` document and the beatmap it describes.

    Returns
    -------
    document : tuple[str, Beatmap]
        The text and the expected decoded beatmap.
    """
    format_version = draw(integers(3, 14))
    mode = draw(sampled_from(GameMode))
    metadata = {
        'Title': draw(field_values()),
        'TitleUnicode': draw(field_values()),
        'Artist': draw(field_values()),
        'ArtistUnicode': draw(field_values()),
        'Creator': draw(field_values()),
        'Version': draw(field_values()),
    }
    difficulty = {
        'HPDrainRate': draw(floats(0, 10)),
        'CircleSize': draw(floats(0, 10)),
        'OverallDifficulty': draw(floats(0, 10)),
        'SliderMultiplier': draw(floats(0.4, 3.6)),
        'SliderTickRate': draw(floats(0.5, 8)),
    }
    approach_rate = draw(floats(0, 10) | just(None))
    if approach_rate is not None:
        difficulty['ApproachRate'] = approach_rate

    timing = draw(lists(timing_points(), max_size=10))
    objects = draw(hit_objects())

    lines = [
        f'osu file format v{format_version}',
        '',
        '[General]',
        'AudioFilename: audio.mp3',
        f'Mode: {int(mode)}',
        '',
        '[Metadata]',
    ]
    lines.extend(f'{k}:{v}' for k, v in metadata.items())
    lines.extend(['', '[Difficulty]'])
    lines.extend(f'{k}:{v!r}' for k, v in difficulty.items())
    lines.extend(['', '[Events]', '//Background and Video events', ''])
    lines.append('[TimingPoints]')
    lines.extend(draw(_record_block(list(map(render_timing_point, timing)))))
    lines.extend(['', '[HitObjects]'])
    lines.extend(draw(_record_block(list(map(render_hit_object, objects)))))

    expected = Beatmap(
        format_version=format_version,
        mode=mode,
        title=metadata['Title'],
        title_unicode=metadata['TitleUnicode'],
        artist=metadata['Artist'],
        artist_unicode=metadata['ArtistUnicode'],
        creator=metadata['Creator'],
        version=metadata['Version'],
        hp_drain_rate=difficulty['HPDrainRate'],
        circle_size=difficulty['CircleSize'],
        overall_difficulty=difficulty['OverallDifficulty'],
        approach_rate=(
            difficulty['OverallDifficulty']
            if approach_rate is None else
            approach_rate
        ),
        slider_multiplier=difficulty['SliderMultiplier'],
        slider_tick_rate=difficulty['SliderTickRate'],
        timing_points=timing,
        hit_objects=objects,
        count_circles=sum(o.is_circle for o in objects),
        count_sliders=sum(o.is_slider for o in objects),
        count_spinners=sum(o.is_spinner for o in objects),
    )
    return '\n'.join(lines), expected
