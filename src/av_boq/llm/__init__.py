from .gemini import GeminiClient, LlmResponse

__all__ = ["GeminiClient", "LlmResponse"]
