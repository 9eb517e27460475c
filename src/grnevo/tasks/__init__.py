"""Example tasks supplying evaluators and DNA factories."""
from .sinusoid import SinusoidTask, input_waves

__all__ = ["SinusoidTask", "input_waves"]
