"""OpenAI Responses API client for nutrition extraction."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from macro_tracker.services.extraction import ExtractionClient


@dataclass
class OpenAIExtractionClient(ExtractionClient):
    """Extraction client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout: float = 30.0) -> "OpenAIExtractionClient":
        """Create an OpenAI extraction client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout))

    async def extract(
        self, *, model: str, store: bool, prompt: str, schema: dict[str, object]
    ) -> str:
        """Call OpenAI Responses API with structured outputs."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [{"type": "input_text", "text": prompt}],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_extract",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=store,
        )
        return response.output_text or ""

    async def close(self) -> None:
        await self.client.close()
