"""Answer Agent - sub-query planning, search fan-out and cited answer synthesis."""

from src.services.agent.router import router
from src.services.agent.service import AnswerOrchestrator

__all__ = ["router", "AnswerOrchestrator"]
