"""Multi-cycle autonomous loop."""

from agentcore.autonomous.loop import AutonomousLoop

__all__ = ["AutonomousLoop"]
