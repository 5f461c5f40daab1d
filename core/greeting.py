# =============================================================================
# core/greeting.py  -  The "greet" tool
# =============================================================================

from core.models import InvocationResult
from core.schemas import GreetInput


def build_greeting(name: str, language: str = "en") -> str:
    """Return the greeting for ``name``; anything but "ko" gets English."""
    if language == "ko":
        return f"안녕하세요, {name}님!"
    return f"Hey there, {name}! 👋 Nice to meet you!"


async def greet(args: GreetInput, context=None) -> InvocationResult:
    return InvocationResult.text(build_greeting(args.name, args.language))
