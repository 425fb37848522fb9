from collections import namedtuple


class Vector2(namedtuple('Vector2', 'x y')):
    """A point on the osu! playfield.

    Parameters
    ----------
    x : int or float
        The x coordinate.
    y : int or float
        The y coordinate.

    Notes
    -----
    Coordinates are stored as floats regardless of how they were written in
    the file. The visible region of the osu! standard playfield is [0, 512]
    by [0, 384], but nothing stops a map from placing objects outside of it.
    """
    def __new__(cls, x, y):
        return super().__new__(cls, float(x), float(y))
