from collections import namedtuple
from enum import unique
import io
from zipfile import ZipFile

import numpy as np

from .bit_enum import BitEnum
from .game_mode import GameMode
from .utils import lazyval


class Timing(namedtuple('Timing', 'time ms_per_beat change')):
    """A timing point assigns a tempo to an offset into a beatmap.

    Parameters
    ----------
    time : float
        When this ``Timing`` takes effect, in milliseconds.
    ms_per_beat : float
        The milliseconds per beat, this is another representation of BPM.
        Inherited timing points store a negative value which scales the tempo
        of the last uninherited point; it is kept exactly as written.
    change : bool
        Whether this point introduces a new uninherited tempo.
    """
    @property
    def inherited(self):
        """Whether this point scales a previous tempo instead of setting one.
        """
        return self.ms_per_beat < 0

    @lazyval
    def bpm(self):
        """The bpm of this timing point.

        If this is an inherited timing point this value will be None.
        """
        if self.inherited or not self.ms_per_beat:
            return None
        return 60000 / self.ms_per_beat

    def __repr__(self):
        inherited = 'inherited ' if self.inherited else ''
        return f'<{type(self).__qualname__}: {inherited}{self.time:g}ms>'


@unique
class HitObjectType(BitEnum):
    """The bits of the type column of a hit object.
    """
    circle = 1
    slider = 2
    new_combo = 4
    spinner = 8
    hold_note = 128


class Circle(namedtuple('Circle', 'position')):
    """The payload of a circle.

    Parameters
    ----------
    position : Vector2
        Where the circle appears on the screen.
    """


class Slider(namedtuple('Slider', 'position repetitions distance')):
    """The payload of a slider.

    Parameters
    ----------
    position : Vector2
        Where the head of the slider appears on the screen.
    repetitions : int
        How many times the slider body is travelled.
    distance : float
        The length of the slider path in osu! pixels.
    """


class HitObject(namedtuple('HitObject', 'time type data')):
    """A playable element of a beatmap.

    Parameters
    ----------
    time : float
        When this element appears in the map, in milliseconds.
    type : int
        The :class:`HitObjectType` bits of this element.
    data : Circle, Slider or None
        The payload. Spinners, and elements which are neither circles nor
        sliders, carry no payload.

    Notes
    -----
    Use :meth:`from_type` to build a ``HitObject``; it picks the payload from
    the type bits so the two can never disagree.
    """
    @classmethod
    def from_type(cls,
                  time,
                  type_,
                  position,
                  repetitions=None,
                  distance=None):
        """Build a ``HitObject`` whose payload matches its type bits.

        Parameters
        ----------
        time : float
            When this element appears in the map, in milliseconds.
        type_ : int
            The :class:`HitObjectType` bits.
        position : Vector2
            Where this element appears on the screen.
        repetitions : int, optional
            The slider repeat count. Required when the slider bit is set.
        distance : float, optional
            The slider length. Required when the slider bit is set.

        Returns
        -------
        hit_object : HitObject
            The new hit object.

        Notes
        -----
        The slider bit takes precedence over the circle bit; an element
        tagged as both carries a :class:`Slider` payload.
        """
        if type_ & HitObjectType.slider:
            if repetitions is None or distance is None:
                raise TypeError('sliders need repetitions and distance')
            data = Slider(position, repetitions, distance)
        elif type_ & HitObjectType.circle:
            data = Circle(position)
        else:
            data = None

        return cls(time, type_, data)

    @property
    def is_circle(self):
        return bool(self.type & HitObjectType.circle)

    @property
    def is_slider(self):
        return bool(self.type & HitObjectType.slider)

    @property
    def is_spinner(self):
        return bool(self.type & HitObjectType.spinner)

    @property
    def position(self):
        """Where this element appears, or None when it carries no payload.
        """
        if self.data is None:
            return None
        return self.data.position

    def __repr__(self):
        kinds = '|'.join(f.name for f in HitObjectType.flags(self.type))
        return (
            f'<{type(self).__qualname__}: {kinds or self.type},'
            f' {self.time:g}ms>'
        )


class Beatmap:
    """A decoded osu! beatmap.

    Parameters
    ----------
    format_version : int
        The version of the beatmap file.
    mode : GameMode
        The game mode.
    title : str
        The title of the song limited to ascii characters.
    title_unicode : str
        The title of the song with unicode support.
    artist : str
        The name of the song artist limited to ascii characters.
    artist_unicode : str
        The name of the song artist with unicode support.
    creator : str
        The username of the mapper.
    version : str
        The name of the beatmap's difficulty.
    hp_drain_rate : float
        The ``HP`` attribute of the beatmap.
    circle_size : float
        The ``CS`` attribute of the beatmap.
    overall_difficulty : float
        The ``OD`` attribute of the beatmap.
    approach_rate : float
        The ``AR`` attribute of the beatmap.
    slider_multiplier : float
        The multiplier for slider velocity.
    slider_tick_rate : float
        How often slider ticks appear.
    timing_points : list[Timing]
        The timing points in the order they appear in the file.
    hit_objects : list[HitObject]
        The hit objects in the order they appear in the file.
    count_circles, count_sliders, count_spinners : int
        The number of hit objects tagged with each kind.

    Notes
    -----
    Every parameter has a default; these are the values a decoded map keeps
    for fields its file does not set. A ``Beatmap`` is filled in by the
    decoder and should be treated as read-only once it is returned.
    """
    def __init__(self,
                 *,
                 format_version=1,
                 mode=GameMode.standard,
                 title='',
                 title_unicode='',
                 artist='',
                 artist_unicode='',
                 creator='',
                 version='',
                 hp_drain_rate=5.0,
                 circle_size=5.0,
                 overall_difficulty=5.0,
                 approach_rate=5.0,
                 slider_multiplier=1.0,
                 slider_tick_rate=1.0,
                 timing_points=None,
                 hit_objects=None,
                 count_circles=0,
                 count_sliders=0,
                 count_spinners=0):
        self.format_version = format_version
        self.mode = mode
        self.title = title
        self.title_unicode = title_unicode
        self.artist = artist
        self.artist_unicode = artist_unicode
        self.creator = creator
        self.version = version
        self.hp_drain_rate = hp_drain_rate
        self.circle_size = circle_size
        self.overall_difficulty = overall_difficulty
        self.approach_rate = approach_rate
        self.slider_multiplier = slider_multiplier
        self.slider_tick_rate = slider_tick_rate
        self.timing_points = [] if timing_points is None else timing_points
        self.hit_objects = [] if hit_objects is None else hit_objects
        self.count_circles = count_circles
        self.count_sliders = count_sliders
        self.count_spinners = count_spinners

    _fields = (
        'format_version',
        'mode',
        'title',
        'title_unicode',
        'artist',
        'artist_unicode',
        'creator',
        'version',
        'hp_drain_rate',
        'circle_size',
        'overall_difficulty',
        'approach_rate',
        'slider_multiplier',
        'slider_tick_rate',
        'timing_points',
        'hit_objects',
        'count_circles',
        'count_sliders',
        'count_spinners',
    )

    def _astuple(self):
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other):
        if not isinstance(other, Beatmap):
            return NotImplemented
        return self._astuple() == other._astuple()

    __hash__ = None

    @property
    def display_name(self):
        """The name of the map as it appears in game.
        """
        return f'{self.artist} - {self.title} [{self.version}]'

    def _bpms(self):
        return np.array(
            [p.bpm for p in self.timing_points if p.bpm is not None],
            dtype=float,
        )

    def bpm_min(self):
        """The minimum BPM in this beatmap.

        Returns
        -------
        bpm : float or None
            The minimum BPM over the uninherited timing points, or None if
            the map has none.
        """
        bpms = self._bpms()
        if not bpms.size:
            return None
        return float(bpms.min())

    def bpm_max(self):
        """The maximum BPM in this beatmap.

        Returns
        -------
        bpm : float or None
            The maximum BPM over the uninherited timing points, or None if
            the map has none.
        """
        bpms = self._bpms()
        if not bpms.size:
            return None
        return float(bpms.max())

    def timing_point_at(self, time):
        """Get the :class:`Timing` in effect at the given time.

        Parameters
        ----------
        time : float
            The time to lookup, in milliseconds.

        Returns
        -------
        timing_point : Timing or None
            The last timing point at or before ``time``. If ``time`` comes
            before every timing point the first one is returned. Maps
            without timing points return None.
        """
        for tp in reversed(self.timing_points):
            if tp.time <= time:
                return tp

        if not self.timing_points:
            return None
        return self.timing_points[0]

    def __repr__(self):
        return f'<{type(self).__qualname__}: {self.display_name}>'

    @classmethod
    def from_osz_path(cls, path, *, diagnostics=None):
        """Read a beatmap collection from an ``.osz`` file on disk.

        Parameters
        ----------
        path : str or pathlib.Path
            The file path to read from.
        diagnostics : callable, optional
            The sink for non-fatal diagnostics.

        Returns
        -------
        beatmaps : dict[str, Beatmap]
            A mapping from difficulty name to the decoded Beatmap.

        Raises
        ------
        DecodeError
            Raised when a member ``.osu`` file cannot be decoded.
        """
        with ZipFile(path) as zf:
            return cls.from_osz_file(zf, diagnostics=diagnostics)

    @classmethod
    def from_path(cls, path, *, encoding='utf-8-sig', diagnostics=None):
        """Read in a ``Beatmap`` object from a file on disk.

        Parameters
        ----------
        path : str or pathlib.Path
            The path to the file to read from.
        encoding : str, optional
            The text encoding of the file. The default also drops a leading
            byte order mark.
        diagnostics : callable, optional
            The sink for non-fatal diagnostics.

        Returns
        -------
        beatmap : Beatmap
            The decoded beatmap object.

        Raises
        ------
        DecodeError
            Raised when the file cannot be decoded as a ``.osu`` file.
        """
        with open(path, encoding=encoding) as file:
            return cls.from_file(file, diagnostics=diagnostics)

    @classmethod
    def from_osz_file(cls, file, *, diagnostics=None):
        """Read a beatmap collection from an open ``.osz`` archive.

        Parameters
        ----------
        file : zipfile.ZipFile
            The zipfile to read from.
        diagnostics : callable, optional
            The sink for non-fatal diagnostics.

        Returns
        -------
        beatmaps : dict[str, Beatmap]
            A mapping from difficulty name to the decoded Beatmap.
        """
        return {
            beatmap.version: beatmap
            for beatmap in (
                cls.parse(
                    file.read(name).decode('utf-8-sig'),
                    diagnostics=diagnostics,
                )
                for name in file.namelist() if name.endswith('.osu')
            )
        }

    @classmethod
    def from_file(cls, file, *, diagnostics=None):
        """Read in a ``Beatmap`` object from an open file object.

        Parameters
        ----------
        file : file-like
            The text file to read from. Lines are consumed one at a time and
            the file is left open.
        diagnostics : callable, optional
            The sink for non-fatal diagnostics.

        Returns
        -------
        beatmap : Beatmap
            The decoded beatmap object.
        """
        from .decoder import decode

        return decode(file, diagnostics=diagnostics)

    @classmethod
    def parse(cls, data, *, diagnostics=None):
        """Decode a ``Beatmap`` from text in the ``.osu`` format.

        Parameters
        ----------
        data : str
            The data to decode.
        diagnostics : callable, optional
            The sink for non-fatal diagnostics.

        Returns
        -------
        beatmap : Beatmap
            The decoded beatmap object.

        Raises
        ------
        DecodeError
            Raised when the data cannot be decoded in the ``.osu`` format.
        """
        from .decoder import decode

        # only \n, \r and \r\n end a line, the same as reading a file
        return decode(io.StringIO(data, newline=None), diagnostics=diagnostics)
