"""
splititer - Lazy sequence operators on splittable producers

Cycling, cross products, running accumulation and maximum filtering,
each implemented as a spliterator that an executor can safely split or
that refuses to split when its result depends on the whole source.
"""

from .accumulating import AccumulatingEntriesSpliterator, AccumulatingSpliterator
from .adapters import into_spliterator, into_stream
from .config import SplitSettings, configure, get_num_threads, get_settings, set_num_threads
from .cross_product import CrossProductMode, CrossProductSpliterator
from .cycling import CyclingSpliterator
from .filtering import FilteringAllMaxSpliterator, FilteringMaxKeysSpliterator
from .functional import Entry, comparing, natural_order, reverse_order
from .operators import (
    accumulate,
    accumulate_entries,
    cross_product,
    cross_product_naturally_ordered,
    cross_product_no_doubles,
    cross_product_ordered,
    cycle,
    filtering_all_max,
    filtering_max_keys,
)
from .producers import IteratorSpliterator, ListSpliterator
from .protocols import UNBOUNDED, Characteristic, Spliterator
from .stream import Stream

__version__ = "0.1.0"

__all__ = [
    "Spliterator",
    "Characteristic",
    "UNBOUNDED",
    "Stream",
    "Entry",
    "natural_order",
    "reverse_order",
    "comparing",
    "into_spliterator",
    "into_stream",
    "ListSpliterator",
    "IteratorSpliterator",
    "CyclingSpliterator",
    "CrossProductMode",
    "CrossProductSpliterator",
    "AccumulatingSpliterator",
    "AccumulatingEntriesSpliterator",
    "FilteringAllMaxSpliterator",
    "FilteringMaxKeysSpliterator",
    "cycle",
    "cross_product",
    "cross_product_no_doubles",
    "cross_product_ordered",
    "cross_product_naturally_ordered",
    "filtering_all_max",
    "filtering_max_keys",
    "accumulate",
    "accumulate_entries",
    "SplitSettings",
    "configure",
    "get_settings",
    "set_num_threads",
    "get_num_threads",
]
