from __future__ import annotations


def raised(error: BaseException) -> BaseException:
    """Raise and catch ``error`` so it carries a real traceback."""

    try:
        raise error
    except BaseException as caught:
        return caught


def chain(*errors: BaseException) -> BaseException:
    """Link ``errors`` outer to inner through ``__cause__``."""

    for outer, inner in zip(errors, errors[1:]):
        outer.__cause__ = inner
    return errors[0]
