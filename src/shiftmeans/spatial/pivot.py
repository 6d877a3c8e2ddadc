"""
Pivot selection for k-d tree construction.

The pivot of a node is the median of a random sample of its points along
the splitting dimension. This does not guarantee an exact median split, but
keeps the expected tree depth logarithmic at a fraction of the cost.
"""

from typing import List, Optional, Sequence, Tuple
import torch


def median_of_randoms(coords: Sequence[Sequence[float]], indices: List[int], dim: int,
                      n_randoms: int = 100,
                      generator: Optional[torch.Generator] = None) -> int:
    """Approximate the median of indices along dim.
    
    Args:
        coords: Coordinates of all points
        indices: Points under consideration
        dim: Splitting dimension
        n_randoms: Sample size; all points are used when there are fewer
        generator: Optional random generator
        
    Returns:
        Position within indices of the chosen pivot
    """
    n = len(indices)
    if n <= n_randoms:
        sample = list(range(n))
    else:
        sample = torch.randperm(n, generator=generator)[:n_randoms].tolist()
        
    # Stable sort keeps equal coordinates in sample order.
    sample.sort(key=lambda pos: coords[indices[pos]][dim])
    return sample[len(sample) // 2]


def partition(coords: Sequence[Sequence[float]], indices: List[int], dim: int,
              pivot: int) -> Tuple[int, List[int], List[int]]:
    """Split indices around the pivot along dim.
    
    Returns:
        The pivot's point index, points strictly below it and the remaining
        points, each side in its original order
    """
    pivot_index = indices[pivot]
    value = coords[pivot_index][dim]
    below, above = [], []
    for pos, i in enumerate(indices):
        if pos == pivot:
            continue
        if coords[i][dim] < value:
            below.append(i)
        else:
            above.append(i)
    return pivot_index, below, above
