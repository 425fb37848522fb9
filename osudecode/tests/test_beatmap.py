from math import isclose
import zipfile

import pytest

import osudecode.example_data.beatmaps
from osudecode import (
    Beatmap,
    Circle,
    GameMode,
    HitObject,
    HitObjectType,
    Slider,
    Timing,
    Vector2,
)


@pytest.fixture
def beatmap():
    return osudecode.example_data.beatmaps.example_song()


def test_version(beatmap):
    assert beatmap.format_version == 14


def test_display_name(beatmap):
    assert beatmap.display_name == 'Example Artist - Example Song [Normal]'
    assert repr(beatmap) == (
        '<Beatmap: Example Artist - Example Song [Normal]>'
    )


def test_parse_section_general(beatmap):
    assert beatmap.mode is GameMode.standard


def test_parse_section_metadata(beatmap):
    assert beatmap.title == 'Example Song'
    assert beatmap.title_unicode == '例のうた'
    assert beatmap.artist == 'Example Artist'
    assert beatmap.artist_unicode == 'Example Artist'
    assert beatmap.creator == 'mapper'
    assert beatmap.version == 'Normal'


def test_parse_section_difficulty(beatmap):
    assert beatmap.hp_drain_rate == 6.5
    assert beatmap.circle_size == 4
    assert beatmap.overall_difficulty == 8
    assert beatmap.approach_rate == 9.5
    assert beatmap.slider_multiplier == 1.8
    assert beatmap.slider_tick_rate == 1


def test_parse_section_timing_points(beatmap):
    assert [tp.change for tp in beatmap.timing_points] == [
        True,
        False,
        False,
        True,
    ]

    timing_points_0 = beatmap.timing_points[0]
    assert timing_points_0.time == 1076
    assert isclose(timing_points_0.ms_per_beat, 307.692307692308)
    assert not timing_points_0.inherited

    timing_points_1 = beatmap.timing_points[1]
    assert timing_points_1.ms_per_beat == -100
    assert timing_points_1.inherited
    assert timing_points_1.bpm is None


def test_parse_section_hit_objects(beatmap):
    assert len(beatmap.hit_objects) == 6
    assert beatmap.count_circles == 3
    assert beatmap.count_sliders == 2
    assert beatmap.count_spinners == 1

    hit_objects_0 = beatmap.hit_objects[0]
    assert hit_objects_0.time == 1076
    assert hit_objects_0.type == HitObjectType.slider | HitObjectType.new_combo
    assert hit_objects_0.position == Vector2(243, 164)
    assert hit_objects_0.data.repetitions == 1
    assert isclose(hit_objects_0.data.distance, 45.0000017166138)

    hit_objects_3 = beatmap.hit_objects[3]
    assert hit_objects_3.data == Slider(Vector2(100, 100), 2, 90)

    spinner = beatmap.hit_objects[4]
    assert spinner.is_spinner
    assert spinner.data is None


def test_counts_match_tags(beatmap):
    assert beatmap.count_circles == sum(
        o.is_circle for o in beatmap.hit_objects
    )
    assert beatmap.count_sliders == sum(
        o.is_slider for o in beatmap.hit_objects
    )
    assert beatmap.count_spinners == sum(
        o.is_spinner for o in beatmap.hit_objects
    )


def test_bpm(beatmap):
    assert round(beatmap.bpm_min()) == 160
    assert round(beatmap.bpm_max()) == 195


def test_bpm_without_timing_points():
    beatmap = Beatmap()
    assert beatmap.bpm_min() is None
    assert beatmap.bpm_max() is None


def test_timing_point_at(beatmap):
    assert beatmap.timing_point_at(0) is beatmap.timing_points[0]
    assert beatmap.timing_point_at(15000) is beatmap.timing_points[2]
    assert beatmap.timing_point_at(20000) is beatmap.timing_points[3]
    assert Beatmap().timing_point_at(0) is None


def test_old_beatmap_approach_rate_fallback():
    beatmap = osudecode.example_data.beatmaps.old_song()
    assert beatmap.format_version == 3
    assert beatmap.overall_difficulty == 4
    assert beatmap.approach_rate == 4
    assert beatmap.title_unicode == ''
    assert beatmap.timing_points == [Timing(500, 500, False)]
    assert (
        beatmap.count_circles,
        beatmap.count_sliders,
        beatmap.count_spinners,
    ) == (2, 1, 1)
    assert beatmap.hit_objects[2].data == Slider(Vector2(448, 320), 1, 384)


def test_decode_is_idempotent():
    load = osudecode.example_data.beatmaps.example_song
    assert load() == load()
    assert load() != osudecode.example_data.beatmaps.old_song()


def test_from_path(tmp_path):
    path = tmp_path / 'map.osu'
    path.write_text(
        'osu file format v14\n\n[Metadata]\nVersion:Hard\n',
        encoding='utf-8-sig',
    )
    beatmap = Beatmap.from_path(path)
    assert beatmap.format_version == 14
    assert beatmap.version == 'Hard'


def test_from_osz_path(tmp_path):
    path = tmp_path / 'set.osz'
    with zipfile.ZipFile(path, 'w') as zf:
        for version in ('Easy', 'Hard'):
            zf.writestr(
                f'set [{version}].osu',
                f'osu file format v14\n\n[Metadata]\nVersion:{version}\n',
            )
        zf.writestr('audio.mp3', b'not audio')

    beatmaps = Beatmap.from_osz_path(path)
    assert sorted(beatmaps) == ['Easy', 'Hard']
    assert beatmaps['Hard'].version == 'Hard'


def test_beatmap_defaults():
    beatmap = Beatmap()
    assert beatmap.format_version == 1
    assert beatmap.mode is GameMode.standard
    assert beatmap.approach_rate == beatmap.overall_difficulty == 5
    assert beatmap.slider_multiplier == beatmap.slider_tick_rate == 1
    assert beatmap.timing_points == []
    assert beatmap.hit_objects == []


def test_vector2_coordinates_are_floats():
    position = Vector2(256, 192)
    assert isinstance(position.x, float)
    assert isinstance(position.y, float)
    assert position == Vector2(256.0, 192.0)


def test_timing_bpm():
    assert Timing(0, 500, True).bpm == 120
    assert Timing(0, -50, False).bpm is None
    assert repr(Timing(10, -50, False)) == '<Timing: inherited 10ms>'


def test_hit_object_from_type():
    position = Vector2(1, 2)
    circle = HitObject.from_type(0, HitObjectType.circle, position)
    assert circle.data == Circle(position)

    spinner = HitObject.from_type(0, HitObjectType.spinner, position)
    assert spinner.data is None

    both = HitObject.from_type(
        0,
        HitObjectType.circle | HitObjectType.slider,
        position,
        repetitions=1,
        distance=10,
    )
    assert both.data == Slider(position, 1, 10)

    with pytest.raises(TypeError):
        HitObject.from_type(0, HitObjectType.slider, position)


def test_hit_object_repr():
    obj = HitObject.from_type(
        1500,
        HitObjectType.circle | HitObjectType.new_combo,
        Vector2(0, 0),
    )
    assert repr(obj) == '<HitObject: circle|new_combo, 1500ms>'
    assert repr(HitObject(0, 0, None)) == '<HitObject: 0, 0ms>'


def test_hit_object_type_bits():
    assert HitObjectType.pack(slider=True, new_combo=True) == 6
    assert HitObjectType.pack() == 0
    assert HitObjectType.flags(12) == [
        HitObjectType.new_combo,
        HitObjectType.spinner,
    ]
    assert HitObjectType.unpack(1)['circle']
    assert not HitObjectType.unpack(1)['slider']

    with pytest.raises(TypeError):
        HitObjectType.pack(hold=True)


def test_game_mode_short_name():
    assert GameMode.standard.short_name == 'osu'
    assert GameMode(2).short_name == 'fruits'


def test_from_osz_path_keeps_unicode_separators(tmp_path):
    path = tmp_path / 'set.osz'
    with zipfile.ZipFile(path, 'w') as zf:
        zf.writestr(
            'set [Hard].osu',
            '\ufeffosu file format v14\n\n[Metadata]\n'
            'Title:a\u2028b\nVersion:Hard\n'.encode('utf-8'),
        )

    beatmap = Beatmap.from_osz_path(path)['Hard']
    assert beatmap.format_version == 14
    assert beatmap.title == 'a\u2028b'
