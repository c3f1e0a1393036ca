"""AI-powered cause list page classifier."""

import json
from pathlib import Path
from typing import Any

from causelist.classification.base import BaseRecordClassifier
from causelist.classification.client_base import BaseClassificationClient
from causelist.classification.exceptions import ClassificationError, ClassificationResponseError
from causelist.classification.identifiers import RandomRecordIdFactory, RecordIdFactory
from causelist.classification.models import Record
from causelist.classification.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)
from causelist.classification.record_builder import build_records
from causelist.logging.logger import Log


class RecordClassifier(BaseRecordClassifier):
    """Extracts case records from one page of text using an AI provider.

    Failures of a single page are logged and degrade to an empty result so a
    run is never aborted by one bad response.
    """

    def __init__(
        self,
        *,
        client: BaseClassificationClient,
        model: str,
        temperature: float = 0.1,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt_path: Path | None = None,
        id_factory: RecordIdFactory | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)
        self._id_factory = id_factory or RandomRecordIdFactory()

    async def classify(self, page_text: str, page_index: int) -> list[Record]:
        if not page_text.strip():
            Log.debug(f"Page {page_index} has no text, skipping classification")
            return []

        try:
            items = await self._classify_items(page_text, page_index)
        except ClassificationError as exc:
            Log.error(f"Classification failed for page {page_index}: {exc}")
            return []
        except Exception:
            Log.exception(f"Unexpected error classifying page {page_index}")
            return []

        records = build_records(items, page_index, self._id_factory)
        Log.info(f"Page {page_index}: {len(records)} cases extracted")
        return records

    async def _classify_items(self, page_text: str, page_index: int) -> list[Any]:
        prompt = self._build_prompt(page_text, page_index)
        Log.debug(f"Classification prompt for page {page_index}:\n{prompt}")

        raw_response = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )
        Log.debug(f"AI raw response for page {page_index}:\n{raw_response}")
        return self._parse_items(raw_response)

    def _build_prompt(self, page_text: str, page_index: int) -> str:
        return self._prompt_template.format(
            page_index=page_index,
            page_text=page_text,
            json_schema=self._json_schema,
        )

    @staticmethod
    def _parse_items(raw: str) -> list[Any]:
        """Accept either a bare JSON array or the {"cases": [...]} envelope."""
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        if not cleaned:
            return []

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ClassificationResponseError(f"Invalid JSON response: {exc}") from exc

        if isinstance(parsed, dict):
            parsed = parsed.get("cases")
        if not isinstance(parsed, list):
            raise ClassificationResponseError(
                "JSON response must be an array or an object with a 'cases' array"
            )
        return parsed
