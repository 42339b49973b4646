"""
Reward function — shaped per-step reward for the grid world.

The reward of a single publication step is

    R(step) = movement_cost + goal_bonus

- **Movement cost** applies to primitive moves only. Walking empty-handed
  costs a small fixed amount; walking loaded costs in proportion to the
  number of carried objects, with an extra charge for every carried object
  that is not a tool. Hauling the table around is worse than hauling the
  brush.

- **Goal bonus** is paid the first time each goal condition holds in an
  episode: table painted, chair painted, door opened.

Costs are negative, so an episode's reward falls with every step taken and
rises only when goals are reached.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from taskgrid.objects import OBJECT_REGISTRY, ObjectId


@dataclass
class RewardConfig:
    """Weights of the shaped reward."""
    base_step_cost: float = -0.01       # moving while carrying nothing
    carry_cost: float = -0.02           # per carried object
    non_tool_carry_cost: float = -0.03  # extra per carried non-tool object
    goal_bonuses: Dict[ObjectId, float] = field(default_factory=lambda: {
        ObjectId.TABLE: 1.0,
        ObjectId.CHAIR: 1.0,
        ObjectId.DOOR: 0.8,
    })


@dataclass
class StepReward:
    """Detailed breakdown of one reward computation."""
    total: float
    base_cost: float = 0.0
    carry_cost: float = 0.0
    non_tool_cost: float = 0.0
    goal_bonus: float = 0.0
    carried: int = 0
    non_tool_carried: int = 0
    goals_awarded: List[ObjectId] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"StepReward(total={self.total:.3f}, base={self.base_cost:.3f}, "
            f"carry={self.carry_cost:.3f} (#{self.carried}), "
            f"non_tool={self.non_tool_cost:.3f} (#{self.non_tool_carried}), "
            f"goals={self.goal_bonus:.3f})"
        )


class RewardFunction:
    """
    Computes the reward of one publication step.

    Parameters
    ----------
    config : RewardConfig
        Cost and bonus weights. Defaults reproduce the standard task.
    """

    def __init__(self, config: Optional[RewardConfig] = None):
        self.config = config or RewardConfig()

    def movement_cost(self, carried: List[ObjectId]) -> Tuple[float, float, float]:
        """(base, carry, non_tool) cost of one primitive move."""
        c = self.config
        if not carried:
            return c.base_step_cost, 0.0, 0.0
        non_tool = sum(1 for o in carried if not OBJECT_REGISTRY[o].is_tool)
        return 0.0, c.carry_cost * len(carried), c.non_tool_carry_cost * non_tool

    def pending_goals(self, goal_states: Dict[ObjectId, Tuple[bool, bool]]) -> List[ObjectId]:
        """
        Goals that hold now but have not been paid yet.

        ``goal_states`` maps each goal object to (achieved, already_awarded).
        """
        return [
            obj for obj, (achieved, awarded) in goal_states.items()
            if achieved and not awarded and obj in self.config.goal_bonuses
        ]

    def compute(self, carried: List[ObjectId],
                goal_states: Dict[ObjectId, Tuple[bool, bool]],
                apply_step_cost: bool) -> StepReward:
        """
        Compute the reward of one step.

        Parameters
        ----------
        carried : List[ObjectId]
            Objects the agent is carrying.
        goal_states : Dict[ObjectId, Tuple[bool, bool]]
            (achieved, already_awarded) for each goal object.
        apply_step_cost : bool
            True for primitive moves; non-positional actions pay no cost.

        Returns
        -------
        StepReward
            Detailed reward breakdown.
        """
        base = carry = non_tool = 0.0
        if apply_step_cost:
            base, carry, non_tool = self.movement_cost(carried)

        goals = self.pending_goals(goal_states)
        bonus = sum(self.config.goal_bonuses[obj] for obj in goals)

        return StepReward(
            total=base + carry + non_tool + bonus,
            base_cost=base,
            carry_cost=carry,
            non_tool_cost=non_tool,
            goal_bonus=bonus,
            carried=len(carried),
            non_tool_carried=sum(
                1 for o in carried if not OBJECT_REGISTRY[o].is_tool),
            goals_awarded=goals,
        )

    def __repr__(self) -> str:
        c = self.config
        return (f"RewardFunction(base={c.base_step_cost}, carry={c.carry_cost}, "
                f"non_tool={c.non_tool_carry_cost})")
