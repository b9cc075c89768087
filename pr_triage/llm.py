"""Language-model completion backends used by the AI reviewer."""

import logging
import shutil
from pathlib import Path

import google.generativeai as genai

from pr_triage.ai_review import Completion
from pr_triage.config import Paths, Settings
from pr_triage.errors import CompletionError
from pr_triage.messages import PI_REVIEW_INSTRUCTION
from pr_triage.utils import run_command

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"


class GeminiCompletion:
    """Completion through the Gemini API."""

    def __init__(self, api_key: str, model: str | None = None) -> None:
        """Configure the SDK and select the model (DEFAULT_GEMINI_MODEL when None)."""
        genai.configure(api_key=api_key)
        self.model_name = model or DEFAULT_GEMINI_MODEL
        self.model = genai.GenerativeModel(self.model_name)

    def __call__(self, prompt: str) -> str:
        """Send the prompt to Gemini and return the response text."""
        response = self.model.generate_content(
            prompt,
            generation_config=genai.types.GenerationConfig(temperature=0.0),
        )
        return response.text


class PiCompletion:
    """Completion through the ``pi`` coding-agent CLI in print mode.

    The prompt embeds the whole PR diff, so it is written to a file and
    attached with ``@file`` instead of being passed as a single argument.
    """

    def __init__(
        self,
        logger: logging.Logger,
        prompt_file: Path,
        model: str | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            logger: Logger instance for output
            prompt_file: File the prompt is written to before each call
            model: Model passed to ``pi --model`` (pi's default when None)
            cwd: Working directory for pi

        """
        self.logger = logger
        self.prompt_file = prompt_file
        self.model = model
        self.cwd = cwd

    def __call__(self, prompt: str) -> str:
        """Run pi on the prompt and return its output."""
        self.prompt_file.write_text(prompt, encoding="utf-8")

        cmd_args = ["pi", "-p"]
        if self.model:
            cmd_args.extend(["--model", self.model])
        cmd_args.extend([f"@{self.prompt_file}", PI_REVIEW_INSTRUCTION])

        try:
            returncode, stdout, stderr = run_command(cmd_args, cwd=self.cwd)
        finally:
            self.prompt_file.unlink(missing_ok=True)

        if returncode != 0:
            self.logger.error("pi exited with code %s", returncode)
            message = f"pi exited with code {returncode}: {stderr.strip()}"
            raise CompletionError(message)
        return stdout


def build_completion(
    settings: Settings,
    paths: Paths,
    logger: logging.Logger,
) -> Completion | None:
    """Create the configured completion backend.

    Args:
        settings: Configuration settings
        paths: Path management (the pi backend writes its prompt file there)
        logger: Logger instance for output

    Returns:
        Completion callable, or None when AI review is unavailable

    """
    if settings.ai_backend == "gemini":
        if not settings.gemini_api_key:
            logger.warning("⚠️  AI review disabled - GEMINI_API_KEY not found")
            return None
        completion = GeminiCompletion(settings.gemini_api_key, settings.model)
        logger.info("🤖 AI review enabled with Gemini (%s)", completion.model_name)
        return completion

    if settings.ai_backend == "pi":
        if shutil.which("pi") is None:
            logger.warning("⚠️  AI review disabled - pi is not installed")
            return None
        logger.info("🤖 AI review enabled with pi")
        return PiCompletion(
            logger,
            paths.prompt_file,
            settings.model,
            cwd=paths.invocation_dir,
        )

    logger.info("AI review disabled by configuration")
    return None
