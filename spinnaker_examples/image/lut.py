import numpy as np
from beartype import beartype


@beartype
def linear_lut(max_range:int, num_entries:int=512) -> np.ndarray:
  """ Identity lookup table sampled at `num_entries` evenly spaced indices.

  Returns an (n, 2) array of (index, value) pairs covering [0, max_range).
  """
  increment = max(max_range // num_entries, 1)
  indices = np.arange(0, max_range, increment, dtype=np.int64)
  return np.stack([indices, indices], axis=1)
