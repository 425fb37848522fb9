class lazyval:
    """Decorator to compute an attribute once and store it on the instance.

    The computed value is written into the instance ``__dict__`` so later
    lookups never reach the descriptor again.
    """
    def __init__(self, fget):
        self._fget = fget
        self._name = None
        self.__doc__ = fget.__doc__

    def __set_name__(self, owner, name):
        self._name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self

        value = self._fget(instance)
        vars(instance)[self._name] = value
        return value
