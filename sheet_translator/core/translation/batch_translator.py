"""
Batch Translator - Translates unique strings in fixed-size batches.

Each batch is one model request. A batch that fails for any reason
resolves all of its strings to an empty translation and the run moves on
to the next batch.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from ..errors import TranslationError
from .gemini_client import GeminiClient
from .response_parser import parse_translation_pairs

logger = logging.getLogger(__name__)

BATCH_SIZE = 100

ProgressCallback = Callable[[int], Awaitable[None]]

PROMPT_TEMPLATE = """Translate the lines of text after delimiter "-->" to Norwegian.{custom_header}
Respond with a JSON array where each entry is an object with two keys:
  "key": the original text exactly as provided,
  "value": the Norwegian translation.
For example, if the input is:
Select...
New
The output should be:
[
  {{"key": "Select...", "value": "Velg..."}},
  {{"key": "New", "value": "Nytt"}}
]
Do not output any additional text.
Here are the strings -->
{lines}"""


def build_prompt(batch: Sequence[str], custom_comments: Optional[str] = None) -> str:
    custom_header = f"\nAdditional instructions: {custom_comments}" if custom_comments else ""
    return PROMPT_TEMPLATE.format(custom_header=custom_header, lines="\n".join(batch))


def progress_percent(processed: int, total: int) -> int:
    """Share of processed strings as a whole percentage, halves rounded up."""
    return int(100 * min(processed, total) / total + 0.5)


class BatchTranslator:

    def __init__(self, client: GeminiClient, batch_size: int = BATCH_SIZE):
        self.client = client
        self.batch_size = batch_size

    async def translate(self, unique_strings: List[str],
                        custom_comments: Optional[str] = None,
                        on_progress: Optional[ProgressCallback] = None) -> Dict[str, str]:
        """
        Translate every unique string and build the translation cache.

        Args:
            unique_strings: Distinct source strings in first-seen order
            custom_comments: Extra instruction appended to every prompt
            on_progress: Awaited with the percentage after each batch

        Returns:
            Mapping with one entry per input string; failed or unmatched
            strings map to ""
        """
        cache: Dict[str, str] = {}
        total = len(unique_strings)

        for start in range(0, total, self.batch_size):
            batch = unique_strings[start:start + self.batch_size]
            batch_number = start // self.batch_size + 1
            logger.info(f"Translating batch {batch_number} ({len(batch)} strings)")

            try:
                pairs = await self._translate_batch(batch, custom_comments)
            except TranslationError as e:
                logger.error(f"Error translating batch starting at index {start}: {e}")
                for original in batch:
                    cache[original] = ""
            else:
                if len(pairs) != len(batch):
                    logger.warning(
                        f"Batch translation count mismatch: expected {len(batch)} "
                        f"but got {len(pairs)}"
                    )
                for pair in pairs:
                    cache[pair["key"].strip()] = pair["value"]
                for original in batch:
                    if original not in cache:
                        logger.warning(f'No matching translation found for "{original}"')
                        cache[original] = ""

            progress = progress_percent(start + self.batch_size, total)
            logger.info(f"Updating progress to {progress}%")
            if on_progress is not None:
                await on_progress(progress)

        return cache

    async def _translate_batch(self, batch: Sequence[str],
                               custom_comments: Optional[str]) -> List[Dict[str, str]]:
        prompt = build_prompt(batch, custom_comments)
        logger.debug(f"Calling model with prompt:\n{prompt}")
        raw_output = await self.client.complete(prompt)
        return parse_translation_pairs(raw_output)
