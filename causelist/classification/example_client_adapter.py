"""Offline classification client.

Answers every page with the same single case, so the whole pipeline can run
without network access or an API key (provider "example").
"""

import asyncio
import json
from typing import ClassVar

from causelist.classification.client_base import BaseClassificationClient


class ExampleClientAdapter(BaseClassificationClient):
    """Returns a fixed, valid page response without calling any provider."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "cases": [
            {
                "caseNumber": "Crl.M. 1/2024",
                "title": "State v. Example",
                "category": "Criminal",
                "summary": "Bail after arrest",
                "lawyers": [],
                "date": None,
                "bench": None,
            }
        ]
    }

    def __init__(self, delay_seconds: float = 0.0) -> None:
        self._delay_seconds = delay_seconds

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        return json.dumps(self.DEFAULT_RESPONSE)
