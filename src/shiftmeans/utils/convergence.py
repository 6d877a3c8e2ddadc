"""
Convergence criteria for the clustering engines.

- Change in assignments (k-means: stop once no point changes cluster)
- Shift tolerance (mean-shift: stop once the summed mode displacement is small)
"""

from typing import Dict, Any
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence once no point changes cluster between two assignments."""
    
    def __init__(self):
        super().__init__()
        self._prev_assignments = None
        self.n_changed = None
        
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Compare with the previous assignments; the first call only records them."""
        current_assignments: Tensor = current_state['assignments']
        
        if self._prev_assignments is None:
            self._prev_assignments = current_assignments.clone()
            return False
            
        n_changed = (current_assignments != self._prev_assignments).sum().item()
        self.n_changed = n_changed
        
        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })
        
        self._prev_assignments = current_assignments.clone()
        return n_changed == 0
        
    def reset(self):
        super().reset()
        self._prev_assignments = None
        self.n_changed = None


class ShiftTolerance(ConvergenceCriterion):
    """Convergence once the total squared mode displacement drops to tol."""
    
    def __init__(self, tol: float):
        """
        Args:
            tol: Largest summed squared displacement considered converged
        """
        super().__init__()
        self.tol = tol
        
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check the displacement of the last shift."""
        delta = current_state['delta']
        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'delta': delta
        })
        return delta <= self.tol
