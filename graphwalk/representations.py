class Object(object):
    def __init__(self, values):
        self._values = values
        for key in values:
            setattr(self, key, values[key])

    def __bool__(self):
        return bool(self._values)

    def __iter__(self):
        return iter(self._values)

    def __contains__(self, key):
        return key in self._values

    def __eq__(self, other):
        if isinstance(other, Object):
            return self._values == other._values
        else:
            return NotImplemented

    def __ne__(self, other):
        return not (self == other)

    def __repr__(self):
        return "{}({!r})".format(type(self).__name__, self._values)

    def to_dict(self):
        return dict(self._values)


class Args(Object):
    """
    Bound arguments of a field occurrence.

    Every parameter of the field is available as an attribute, with
    defaults filled in. ``is_set`` tells apart arguments supplied by the
    document from those left at their default.
    """

    def __init__(self, values, supplied):
        super().__init__(values)
        self._supplied = frozenset(supplied)

    def is_set(self, name):
        return name in self._supplied

    def supplied(self):
        return dict(
            (name, value)
            for name, value in self._values.items()
            if name in self._supplied
        )
