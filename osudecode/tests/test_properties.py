from hypothesis import given, settings

from osudecode import Beatmap, DiagnosticCollector, decode
from osudecode.strategies import beatmap_documents


@given(beatmap_documents())
@settings(report_multiple_bugs=False)
def test_decode(document):
    text, expected = document
    diagnostics = DiagnosticCollector()
    beatmap = Beatmap.parse(text, diagnostics=diagnostics)

    attrs = [
        'format_version', 'mode',
        'title', 'title_unicode', 'artist', 'artist_unicode', 'creator',
        'version',
        'hp_drain_rate', 'circle_size', 'overall_difficulty',
        'approach_rate', 'slider_multiplier', 'slider_tick_rate',
        'count_circles', 'count_sliders', 'count_spinners',
    ]
    for attr in attrs:
        v1 = getattr(beatmap, attr)
        v2 = getattr(expected, attr)
        assert v1 == v2, (attr, v1, v2)

    assert beatmap.timing_points == expected.timing_points
    assert beatmap.hit_objects == expected.hit_objects
    assert not diagnostics.messages


@given(beatmap_documents())
def test_counts_match_tags(document):
    text, _ = document
    beatmap = Beatmap.parse(text)
    objects = beatmap.hit_objects

    assert beatmap.count_circles == sum(o.is_circle for o in objects)
    assert beatmap.count_sliders == sum(o.is_slider for o in objects)
    assert beatmap.count_spinners == sum(o.is_spinner for o in objects)


@given(beatmap_documents())
def test_decode_is_idempotent(document):
    text, _ = document
    assert Beatmap.parse(text) == Beatmap.parse(text)


@given(beatmap_documents())
def test_file_and_text_agree(document):
    text, expected = document
    lines = [line + '\n' for line in text.split('\n')]
    assert decode(lines) == Beatmap.parse(text) == expected
