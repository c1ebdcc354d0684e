import asyncio
from typing import Optional
import google.generativeai as genai
from utils.errors import GenerationTimeout, MalformedAiResponse, UpstreamFailure
from utils.logger import get_logger

logger = get_logger("gemini")


class GeminiService:
    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-2.5-flash",
        timeout: float = 60,
        temperature: float = 0.3,
        model=None,
    ):
        self.model_name = model_name
        self.timeout = timeout
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(
                model_name,
                generation_config=genai.GenerationConfig(temperature=temperature),
            )
        self.model = model

    async def generate(self, prompt: str) -> str:
        try:
            response = await asyncio.wait_for(
                self.model.generate_content_async(prompt), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.error(f"Gemini call timed out after {self.timeout}s")
            raise GenerationTimeout()
        except Exception as e:
            logger.error(f"Gemini call failed: {e}")
            raise UpstreamFailure() from e

        try:
            text = response.text
        except ValueError as e:
            # raised when the candidate was blocked or has no parts
            logger.error(f"Gemini returned no usable text: {e}")
            raise MalformedAiResponse() from e

        if not text or not text.strip():
            raise MalformedAiResponse()
        return text
