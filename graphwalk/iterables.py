def find(predicate, iterable, default=None):
    return next(filter(predicate, iterable), default)


def partition(predicate, iterable):
    true_values = []
    false_values = []

    for element in iterable:
        if predicate(element):
            true_values.append(element)
        else:
            false_values.append(element)

    return true_values, false_values


def to_dict(iterable):
    result = {}

    for key, value in iterable:
        if key in result:
            raise KeyError("key is already in dict: {!r}".format(key))

        result[key] = value

    return result


def merge_by_key(iterable, key, merge):
    """
    Combine elements that share a key using ``merge``, in the order each
    key is first seen.
    """
    result = {}

    for element in iterable:
        element_key = key(element)
        if element_key in result:
            result[element_key] = merge(result[element_key], element)
        else:
            result[element_key] = element

    return list(result.values())
