from __future__ import annotations

from pathlib import Path
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from smartmeal.services.errors import (
    GeminiConfigurationError,
    GeminiPromptError,
    GeminiRequestError,
    GeminiResponseError,
    GenerationTimeoutError,
    RateLimitedError,
)


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.5-flash",
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._configure_api()

    def _configure_api(self) -> None:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Google API key.")
        genai.configure(api_key=self.api_key)

    def _load_system_prompt(self, file_path: Path) -> str:
        try:
            return file_path.read_text(encoding="utf-8")
        except FileNotFoundError as not_found_error:
            raise GeminiPromptError(f"Prompt file not found: {file_path}") from not_found_error
        except (OSError, IOError) as io_error:
            raise GeminiPromptError(f"Unable to read prompt file: {io_error}") from io_error

    def generate_content(
        self,
        user_prompt: str,
        system_prompt_path: Path,
        *,
        response_mime_type: Optional[str] = None,
    ) -> str:
        system_instruction = self._load_system_prompt(system_prompt_path)
        generation_config = {"response_mime_type": response_mime_type} if response_mime_type else None
        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )

        request_options = {"timeout": self.timeout_seconds} if self.timeout_seconds else None
        try:
            response = model.generate_content(user_prompt, request_options=request_options)
        except google_exceptions.DeadlineExceeded as err:
            raise GenerationTimeoutError(self.model_name, self.timeout_seconds or 0) from err
        except google_exceptions.ResourceExhausted as err:
            raise RateLimitedError("Gemini API rate limit reached.") from err
        except google_exceptions.GoogleAPIError as err:
            raise GeminiRequestError(f"Gemini request failed: {err}") from err

        try:
            return response.text
        except ValueError as err:
            # raised when the candidate was blocked or carries no text parts
            raise GeminiResponseError("Model response did not include text content.") from err
