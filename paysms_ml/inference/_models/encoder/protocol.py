"""Encoder protocol definition."""

from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class Encoder(Protocol):
    """Protocol for text embedding encoders.

    Encoders are synchronous; callers that run on the event loop offload
    encode() to a worker thread.
    """

    @property
    def dimension(self) -> int:
        """Return the embedding dimension."""
        ...

    @property
    def model_name(self) -> str:
        """Return the model identifier."""
        ...

    def encode(self, texts: list[str]) -> NDArray[np.float32]:
        """Encode texts to embeddings.

        Parameters
        ----------
        texts
            Templatized SMS bodies, one per row.

        Returns
        -------
        NDArray[np.float32]
            L2-normalized embeddings with shape (n_texts, dimension).
        """
        ...

    def warmup(self) -> None:
        """Run one inference so the first real request is not a cold start."""
        ...
