"""embedsearch - nearest-neighbour search over quantized text embeddings.

Brute-force, deterministic top-k similarity search over int8 embedding
vectors, with pluggable embedders and document stores.
"""

__version__ = "0.1.0"
__author__ = "embedsearch Contributors"

from embedsearch.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
