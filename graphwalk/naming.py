import re


_underscore_and_letter = re.compile(r"_(.)")


def snake_case_to_camel_case(name):
    name = name.rstrip("_")
    return name[:1].lower() + _underscore_and_letter.sub(lambda match: match.group(1).upper(), name[1:])


def camel_case_keys(values):
    return dict(
        (snake_case_to_camel_case(key), value)
        for key, value in values.items()
    )
