import enum
from functools import reduce
import operator as op


class BitEnum(enum.IntEnum):
    """A type for enums whose members are single bits of an integer field.
    """
    @classmethod
    def pack(cls, **kwargs):
        """Build a bitmask from named bits.

        Parameters
        ----------
        kwargs
            The names of the bits and whether they are set. Bits which are
            not passed are cleared.

        Returns
        -------
        bitmask : int
            The packed bitmask.
        """
        members = cls.__members__
        try:
            return reduce(
                op.or_,
                (members[k] * bool(v) for k, v in kwargs.items()),
                0,
            )
        except KeyError as e:
            raise TypeError(f'{e} is not a member of {cls.__qualname__}')

    @classmethod
    def unpack(cls, bitmask):
        """Unpack a bitmask into a dictionary from bit name to bit state.

        Parameters
        ----------
        bitmask : int
            The bitmask to unpack.

        Returns
        -------
        status : dict[str, bool]
            The mapping from bit name to whether it is set.
        """
        return {k: bool(bitmask & v) for k, v in cls.__members__.items()}

    @classmethod
    def flags(cls, bitmask):
        """The members whose bit is set in ``bitmask``.

        Parameters
        ----------
        bitmask : int
            The bitmask to inspect.

        Returns
        -------
        members : list[BitEnum]
            The set members in declaration order. Bits which do not belong
            to any member are ignored.
        """
        return [member for member in cls if bitmask & member]
