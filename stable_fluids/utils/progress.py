"""
Progress display for the time-stepping loop
"""

from typing import Iterable, Iterator, TypeVar

from tqdm.auto import tqdm

T = TypeVar('T')


def progress(iterable: Iterable[T], desc: str = 'Timestepping ...',
             enabled: bool = True, **kwargs) -> Iterator[T]:
    """
    Yield items from iterable, showing a tqdm bar when enabled.
    """
    kwargs.setdefault('leave', True)
    bar = tqdm(iterable, desc=desc, disable=not enabled, **kwargs)
    try:
        for item in bar:
            yield item
    finally:
        bar.close()
