"""
Convergence criteria for the clustering engines.

K-means stops once an iteration leaves every cluster's membership exactly
as it was; the Kohonen map runs a fixed number of epochs and has no
criterion.
"""

from typing import Dict, Any

from ..base.interfaces import ConvergenceCriterion


class MembershipUnchanged(ConvergenceCriterion):
    """Convergence when no cluster's member set changed in an iteration.

    Compares ``current_members`` with ``previous_members`` of every cluster
    as sets (same elements, any order).
    """

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if memberships have stabilized."""
        clusters = current_state['clusters']

        changed = [k for k, cluster in enumerate(clusters)
                   if cluster.membership_changed()]

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed_clusters': len(changed),
            'changed_clusters': changed
        })

        return not changed
