class Lazy(object):
    def __init__(self, produce):
        if not callable(produce):
            produce = lambdaize(produce)

        self._produce = produce
        self._result = []

    @property
    def is_evaluated(self):
        return len(self._result) > 0

    def __call__(self):
        if not self.is_evaluated:
            self._result.append(self._produce())

        return self._result[0]


def memoize(func):
    return Lazy(func)


def lambdaize(value):
    return lambda: value
