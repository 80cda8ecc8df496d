"""Preprocessing pass -- turn a raw OpenAPI spec into a :class:`~specgraph.models.PreprocessedModel`.

Typical usage::

    from specgraph.models import PreprocessOptions
    from specgraph.preprocessor import preprocess_oas

    model = preprocess_oas(raw_spec, PreprocessOptions(strict=True))

Sub-modules:

* :mod:`~specgraph.preprocessor.orchestrator` -- Walks every operation and
  assembles the model.
* :mod:`~specgraph.preprocessor.definitions` -- Deduplicates payload schemas
  into shared, uniquely named data definitions.
* :mod:`~specgraph.preprocessor.equality` -- Structural schema equality.
* :mod:`~specgraph.preprocessor.security` -- Security scheme normalization.
* :mod:`~specgraph.preprocessor.sub_operations` -- Nested GET operation links.
"""

from specgraph.preprocessor.definitions import create_or_reuse_data_def
from specgraph.preprocessor.orchestrator import preprocess_oas

__all__ = ["preprocess_oas", "create_or_reuse_data_def"]
