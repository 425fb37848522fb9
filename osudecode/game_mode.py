from enum import IntEnum, unique


@unique
class GameMode(IntEnum):
    """The game modes a beatmap can be written for.

    The value is the integer stored in the ``Mode`` field of the
    ``[General]`` section.
    """
    standard = 0
    taiko = 1
    ctb = 2
    mania = 3

    @property
    def short_name(self):
        """The name osu! uses for this mode in urls and rulesets.
        """
        return _short_names[self]


_short_names = {
    GameMode.standard: 'osu',
    GameMode.taiko: 'taiko',
    GameMode.ctb: 'fruits',
    GameMode.mania: 'mania',
}
