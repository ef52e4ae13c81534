"""SpliceMap: Zoomed splice-site statistics against a genome overview.

SpliceMap relates genome-wide read support at splice donor and acceptor
sites to per-site box plots and sequence logos, joined back to the
overview axis by connectors.

Example:
    >>> import splicemap
    >>> splicemap.__version__
    '0.1.0'

Modules:
    io: Readers for GTF, BED and SJ count tables
    core: Quantile/outlier statistics and per-position aggregation
    viz: Drawing primitives, panel renderers, layout and backends
    utils: Logging utilities
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
