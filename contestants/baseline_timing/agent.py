"""
Baseline Timing Agent - Drops when the block lines up with the stack.

This is a simple heuristic agent that watches the offset between the moving
block and the top of the stack and drops once that offset is within half a
tick of motion.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark to compare against
3. A verification that the environment API works correctly

Strategy:
- Read offset_to_reference (moving.left - top.left)
- Read speed (pixels the block will travel before the next observation)
- Drop when |offset| <= speed / 2, otherwise wait
"""

from typing import Any, Dict


class StackerAgent:
    """
    Simple baseline agent that drops on the closest tick to perfect alignment.

    Since the block moves `speed` pixels per tick, one observation per pass
    is always within `speed / 2` of the reference, so each drop trims at
    most half a tick of width.
    """

    def __init__(self, slack: float = 0.0, debug: bool = False):
        """
        Initialize the agent.

        Args:
            slack: Extra tolerance in pixels added to speed / 2.
            debug: If True, print decisions to stdout.
        """
        self.slack = slack
        self.debug = debug

    def reset(self) -> None:
        """Called when a new episode starts. The agent is stateless."""

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Decide whether to drop.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            1 to drop, 0 to wait.
        """
        offset = float(observation["offset_to_reference"])
        speed = float(observation["speed"])
        tolerance = speed / 2.0 + self.slack + 1e-6

        action = int(abs(offset) <= tolerance)

        if action and (debug or self.debug):
            print(f"[Timing Agent] Level={int(observation['level'])}, "
                  f"Offset={offset:.2f}, Speed={speed:.2f}, "
                  f"Width={float(observation['width']):.1f}")

        return action


# Convenience function to create agent (used by tools)
def create_agent(**kwargs) -> StackerAgent:
    """Factory function to create an agent instance."""
    return StackerAgent(**kwargs)
