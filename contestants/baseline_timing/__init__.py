"""
Baseline Timing Agent Package

A simple heuristic agent that drops when the moving block lines up with
the top of the stack. Serves as a benchmark and example.
"""

from .agent import StackerAgent, create_agent

__all__ = ["StackerAgent", "create_agent"]
