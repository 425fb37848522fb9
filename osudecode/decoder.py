"""Decoder for the text ``.osu`` beatmap format.

The decoder makes a single forward pass over the lines of a file. Each line
is classified by :class:`LineScanner`; section headers switch the current
section and the content lines of the five sections we understand are read a
whole block at a time and handed to a field mapper. A block ends at a blank
line, at the end of the input, or just before the next section header.
"""
from collections import namedtuple
from enum import Enum
import math
import re

from .beatmap import Beatmap, HitObject, HitObjectType, Timing
from .diagnostics import log_diagnostic
from .game_mode import GameMode
from .position import Vector2


class DecodeError(ValueError):
    """Raised when text cannot be decoded as a ``.osu`` beatmap.
    """


class LineKind(Enum):
    blank = 'blank'
    comment = 'comment'
    header = 'header'
    content = 'content'


class Line(namedtuple('Line', 'kind text number')):
    """A classified line of input.

    Parameters
    ----------
    kind : LineKind
        What the line is.
    text : str
        The trimmed line. For headers this is the section name.
    number : int
        The 1-based line number in the input.
    """


def classify(raw, number=0):
    """Classify a raw line of ``.osu`` text.

    Parameters
    ----------
    raw : str
        The line as read from the input, possibly with its newline.
    number : int, optional
        The line number to attach.

    Returns
    -------
    line : Line
        The classified line.
    """
    text = raw.strip()
    if not text:
        return Line(LineKind.blank, text, number)

    # lines starting with a space or underscore are comments, like in lazer
    if raw.startswith((' ', '_')) or text.startswith('//'):
        return Line(LineKind.comment, text, number)

    if text.startswith('['):
        name = text[1:-1] if text.endswith(']') else text[1:]
        return Line(LineKind.header, name, number)

    return Line(LineKind.content, text, number)


class LineScanner:
    """A classified view of a line source with one line of lookahead.

    Parameters
    ----------
    lines : iterable[str]
        The raw lines. This is consumed lazily, one line at a time.
    """
    def __init__(self, lines):
        self._lines = iter(lines)
        self._number = 0
        self._peeked = None

    def peek(self):
        """Look at the next line without consuming it.

        Returns
        -------
        line : Line or None
            The next line, or None at the end of the input.
        """
        if self._peeked is None:
            try:
                raw = next(self._lines)
            except StopIteration:
                return None
            self._number += 1
            if self._number == 1:
                # a byte order mark may survive when the source was not
                # opened with utf-8-sig
                raw = raw.lstrip('\ufeff')
            self._peeked = classify(raw, self._number)
        return self._peeked

    def advance(self):
        """Consume the next line.

        Returns
        -------
        line : Line or None
            The consumed line, or None at the end of the input.
        """
        line = self.peek()
        self._peeked = None
        return line

    def read_block(self):
        """Consume the data block starting at the next line.

        Comment lines inside the block are skipped. The block ends at a blank
        line, which is consumed, or before a section header, which is not.

        Returns
        -------
        lines : list[Line]
            The content lines of the block.
        """
        block = []
        while True:
            line = self.peek()
            if line is None or line.kind is LineKind.header:
                return block

            self.advance()
            if line.kind is LineKind.blank:
                return block
            if line.kind is LineKind.content:
                block.append(line)


def read_section_pairs(scanner, section):
    """Read a block of ``Key: value`` lines.

    Parameters
    ----------
    scanner : LineScanner
        The scanner positioned at the first line of the block.
    section : str
        The name of the section being read, for error messages.

    Returns
    -------
    pairs : dict[str, str]
        The mapping from key to value. When a key repeats the last value
        wins.

    Raises
    ------
    DecodeError
        Raised when a line has no ``:`` separator.
    """
    pairs = {}
    for line in scanner.read_block():
        key, sep, value = line.text.partition(':')
        if not sep:
            raise DecodeError(
                f'line {line.number}: invalid key/value line in section'
                f' {section!r}: {line.text!r}',
            )
        pairs[key.rstrip()] = value.lstrip()

    return pairs


def read_section_lines(scanner):
    """Read a block of comma delimited records.

    Parameters
    ----------
    scanner : LineScanner
        The scanner positioned at the first line of the block.

    Returns
    -------
    records : list[Line]
        The content lines of the block.
    """
    return scanner.read_block()


_integer = re.compile(r'[+-]?\d+', re.ASCII)
_decimal = re.compile(
    r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?',
    re.ASCII,
)


def parse_int(value):
    """Parse an integer written as plain ascii digits.

    Raises
    ------
    ValueError
        Raised when ``value`` is not an optionally signed run of digits.
    """
    text = value.strip()
    if _integer.fullmatch(text) is None:
        raise ValueError(f'invalid integer: {value!r}')
    return int(text)


def parse_float(value):
    """Parse a finite decimal number.

    ``nan``, ``inf``, digit separators and non-ascii digits are rejected
    along with anything else that is not written like ``-1.5e3``.
    """
    text = value.strip()
    if _decimal.fullmatch(text) is None:
        raise ValueError(f'invalid number: {value!r}')

    result = float(text)
    if not math.isfinite(result):
        raise ValueError(f'number out of range: {value!r}')
    return result


def _parse_field(parse, section, field, value, kind):
    try:
        return parse(value)
    except ValueError as e:
        raise DecodeError(
            f'field {field!r} in section {section!r} should be {kind},'
            f' got {value!r}',
        ) from e


def _parse_column(parse, line, columns, ix, name, kind):
    try:
        value = columns[ix]
    except IndexError:
        raise DecodeError(
            f'line {line.number}: missing {name} in {line.text!r}',
        )

    try:
        return parse(value)
    except ValueError as e:
        raise DecodeError(
            f'line {line.number}: {name} should be {kind}, got {value!r}',
        ) from e


class _DecodeState:
    """The beatmap being built and what the decoder has set on it.
    """
    def __init__(self, diagnostics):
        self.beatmap = Beatmap()
        self.diagnostics = diagnostics
        self.fields_set = set()

    def set(self, field, value):
        setattr(self.beatmap, field, value)
        self.fields_set.add(field)


_metadata_fields = {
    'Title': 'title',
    'TitleUnicode': 'title_unicode',
    'Artist': 'artist',
    'ArtistUnicode': 'artist_unicode',
    'Creator': 'creator',
    'Version': 'version',
}


def _map_metadata(state, pairs):
    for key, value in pairs.items():
        try:
            field = _metadata_fields[key]
        except KeyError:
            continue
        state.set(field, value)


def _map_general(state, pairs):
    try:
        value = pairs['Mode']
    except KeyError:
        return

    mode = _parse_field(parse_int, 'General', 'Mode', value, 'an int')
    try:
        mode = GameMode(mode)
    except ValueError as e:
        raise DecodeError(
            "field 'Mode' in section 'General' names an unknown game mode,"
            f' got {value!r}',
        ) from e
    state.set('mode', mode)


_difficulty_fields = {
    'CircleSize': 'circle_size',
    'OverallDifficulty': 'overall_difficulty',
    'ApproachRate': 'approach_rate',
    'HPDrainRate': 'hp_drain_rate',
    'SliderMultiplier': 'slider_multiplier',
    'SliderTickRate': 'slider_tick_rate',
}


def _map_difficulty(state, pairs):
    for key, value in pairs.items():
        try:
            field = _difficulty_fields[key]
        except KeyError:
            continue
        state.set(
            field,
            _parse_field(parse_float, 'Difficulty', key, value, 'a float'),
        )


def _map_timing_points(state, records):
    append = state.beatmap.timing_points.append
    for line in records:
        columns = line.text.split(',')
        if len(columns) > 8:
            state.diagnostics(
                f'line {line.number}: timing point with trailing values',
            )

        time = _parse_column(
            parse_float,
            line,
            columns,
            0,
            'time',
            'a float',
        )
        ms_per_beat = _parse_column(
            parse_float,
            line,
            columns,
            1,
            'ms_per_beat',
            'a float',
        )
        change = len(columns) >= 7 and columns[6].strip() != '0'
        append(Timing(time, ms_per_beat, change))


def _map_hit_objects(state, records):
    beatmap = state.beatmap
    append = beatmap.hit_objects.append
    for line in records:
        columns = line.text.split(',')
        if len(columns) > 11:
            state.diagnostics(
                f'line {line.number}: object with trailing values',
            )

        time = _parse_column(
            parse_float,
            line,
            columns,
            2,
            'time',
            'a float',
        )
        type_ = _parse_column(parse_int, line, columns, 3, 'type', 'an int')

        position = repetitions = distance = None
        if type_ & (HitObjectType.circle | HitObjectType.slider):
            position = Vector2(
                _parse_column(parse_float, line, columns, 0, 'x', 'a float'),
                _parse_column(parse_float, line, columns, 1, 'y', 'a float'),
            )

        if type_ & HitObjectType.circle:
            beatmap.count_circles += 1
        if type_ & HitObjectType.spinner:
            beatmap.count_spinners += 1
        if type_ & HitObjectType.slider:
            beatmap.count_sliders += 1
            repetitions = _parse_column(
                parse_int,
                line,
                columns,
                6,
                'repetitions',
                'an int',
            )
            distance = _parse_column(
                parse_float,
                line,
                columns,
                7,
                'distance',
                'a float',
            )
            if type_ & HitObjectType.circle:
                state.diagnostics(
                    f'line {line.number}: object tagged as both circle and'
                    ' slider',
                )

        append(
            HitObject.from_type(time, type_, position, repetitions, distance),
        )


_pair_sections = {
    'General': _map_general,
    'Metadata': _map_metadata,
    'Difficulty': _map_difficulty,
}

_record_sections = {
    'TimingPoints': _map_timing_points,
    'HitObjects': _map_hit_objects,
}

# field -> field it defaults to, applied when leaving the section if the
# field was never set
_section_fallbacks = {
    'Difficulty': {'approach_rate': 'overall_difficulty'},
}

_format_version_marker = 'file format v'
_leading_digits = re.compile(r'\d+', re.ASCII)


def _parse_format_version(state, line):
    ix = line.text.find(_format_version_marker)
    if ix < 0:
        return

    rest = line.text[ix + len(_format_version_marker):]
    match = _leading_digits.match(rest)
    if match is None:
        raise DecodeError(
            f'line {line.number}: format version should be an int,'
            f' got {rest!r}',
        )
    state.beatmap.format_version = int(match.group())


def _leave_section(state, section):
    fallbacks = _section_fallbacks.get(section, {})
    beatmap = state.beatmap
    for field, source in fallbacks.items():
        if field not in state.fields_set:
            setattr(beatmap, field, getattr(beatmap, source))


def decode(lines, *, diagnostics=None):
    """Decode a beatmap from the lines of a ``.osu`` file.

    Parameters
    ----------
    lines : iterable[str]
        The lines of the file. Open text files work directly.
    diagnostics : callable, optional
        Called with a message for each non-fatal problem found in the input.
        Defaults to :func:`osudecode.diagnostics.log_diagnostic`.

    Returns
    -------
    beatmap : Beatmap
        The decoded beatmap.

    Raises
    ------
    DecodeError
        Raised when the input is malformed. Nothing is returned in this case.
    """
    if diagnostics is None:
        diagnostics = log_diagnostic

    state = _DecodeState(diagnostics)
    scanner = LineScanner(lines)
    section = None

    while True:
        line = scanner.peek()
        if line is None:
            break

        if line.kind is LineKind.header:
            scanner.advance()
            _leave_section(state, section)
            section = line.text
        elif line.kind is not LineKind.content:
            scanner.advance()
        elif section in _pair_sections:
            _pair_sections[section](
                state,
                read_section_pairs(scanner, section),
            )
        elif section in _record_sections:
            _record_sections[section](state, read_section_lines(scanner))
        else:
            scanner.advance()
            _parse_format_version(state, line)

    _leave_section(state, section)
    return state.beatmap
