"""
Streams transcript summaries from a locally running Ollama server.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable

import aiohttp

from ytrs_cli.exceptions import SummarizerError

log = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    "Summarize this content in '{language}' in a few bullet points: \n```{content}```"
)


def build_prompt(content: str, language: str) -> str:
    return SUMMARY_PROMPT.format(language=language, content=content)


class OllamaClient:
    """Minimal async client for the Ollama HTTP API."""

    def __init__(self, host: str = "http://localhost:11434", timeout: float = 600):
        self.host = host.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout, connect=10)
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def list_models(self) -> list[str]:
        """Returns the names of locally available models."""
        url = f"{self.host}/api/tags"
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                response.raise_for_status()
                data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SummarizerError(
                f"Could not reach Ollama at {self.host}: {e}", argv=[url]
            ) from e
        return [m["name"] for m in data.get("models", []) if m.get("name")]

    async def generate_stream(self, model: str, prompt: str) -> AsyncIterator[str]:
        """Yields response fragments as the model produces them."""
        url = f"{self.host}/api/generate"
        payload = {"model": model, "prompt": prompt, "stream": True}
        try:
            session = await self._get_session()
            async with session.post(url, json=payload) as response:
                if response.status != 200:
                    body = await response.text()
                    raise SummarizerError(
                        f"Ollama returned HTTP {response.status}: {body.strip()}",
                        argv=[url],
                        returncode=response.status,
                    )
                async for raw_line in response.content:
                    line = raw_line.strip()
                    if not line:
                        continue
                    chunk = json.loads(line)
                    if error := chunk.get("error"):
                        raise SummarizerError(f"Ollama error: {error}", argv=[url])
                    if text := chunk.get("response"):
                        yield text
                    if chunk.get("done"):
                        break
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SummarizerError(
                f"Could not reach Ollama at {self.host}: {e}", argv=[url]
            ) from e
        except json.JSONDecodeError as e:
            raise SummarizerError(
                f"Malformed response from Ollama: {e}", argv=[url]
            ) from e


class Summarizer:
    """Sends a transcript to a model and forwards the answer as it streams in."""

    def __init__(self, client: OllamaClient, write: Callable[[str], None]):
        self.client = client
        self._write = write

    async def summarize(self, content: str, language: str, model: str) -> str:
        if not content.strip():
            raise SummarizerError("The transcript is empty; nothing to summarize.")
        log.debug(f"Summarizing {len(content)} characters with '{model}'.")
        parts: list[str] = []
        async for fragment in self.client.generate_stream(
            model, build_prompt(content, language)
        ):
            parts.append(fragment)
            self._write(fragment)
        return "".join(parts)
